import builtins
import json

import pytest

from tinybasic.__main__ import main


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write(tmp_path, 'p.bas', '10 PRINT "hi"\n20 END\n')
    main([str(path)])
    assert capsys.readouterr().out == 'hi\n'


def test_runtime_error_exits_with_status_1(tmp_path, capsys):
    path = write(tmp_path, 'p.bas', '10 RETURN\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    assert 'ReturnWithoutGosub' in capsys.readouterr().err


def test_syntax_error_exits_with_status_1(tmp_path, capsys):
    path = write(tmp_path, 'p.bas', '10 PRINT 1\n20 LET\n')
    with pytest.raises(SystemExit):
        main([str(path)])
    assert 'Syntax error' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main([str(tmp_path / 'nope.bas')])
    assert 'not found' in capsys.readouterr().err


def test_emit_and_run_ast(tmp_path, capsys):
    path = write(tmp_path, 'p.bas', '10 FOR I=1 TO 2\n20 PRINT I\n30 NEXT I\n')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'p.bas.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    assert json.loads(out_path.read_text(encoding='utf-8'))['type'] == 'Program'
    main(['--ast', str(out_path)])
    assert capsys.readouterr().out == '1\n2\n'


def test_interactive_console(monkeypatch, capsys):
    lines = iter(['10 PRINT 5*5', 'RUN', 'BYE'])
    monkeypatch.setattr(builtins, 'input', lambda prompt='': next(lines))
    main([])
    assert capsys.readouterr().out == 'Ready.\n25\n'


def test_debug_file_written(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path, 'p.bas', '10 PRINT 1\n')
    main(['-vv', str(path)])
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert '10 PRINT 1' in trace
