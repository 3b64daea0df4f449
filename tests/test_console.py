from tinybasic.console import Console
from tinybasic.interpreter import Interpreter


def make_console(inputs=None):
    out = []
    answers = iter(inputs or [])
    interp = Interpreter(output=out.append, input_fn=lambda prompt: next(answers))
    return Console(interp), out


def feed(console, *lines):
    for line in lines:
        assert console.handle_line(line)


def test_numbered_lines_edit_the_program():
    console, out = make_console()
    feed(console, '20 PRINT "world"', '10 PRINT "hello"', 'RUN')
    assert out == ['hello', 'world']


def test_replace_and_delete_lines():
    console, out = make_console()
    feed(console, '10 PRINT 1', '20 PRINT 2', '10 PRINT 3', '20', 'LIST')
    assert out == ['10 PRINT 3']


def test_immediate_statements_share_variables():
    console, out = make_console()
    feed(console, 'LET A=4', 'PRINT A*A')
    assert out == ['16']


def test_syntax_errors_are_reported_and_session_continues():
    console, out = make_console()
    feed(console, '10 PRINT (1', 'PRINT $', 'PRINT 1')
    assert out[0] == 'Syntax error: unbalanced parenthesis in line 10'
    assert out[1].startswith('Lexical error: unexpected character')
    assert out[2] == '1'
    assert len(console.program) == 0


def test_runtime_errors_are_reported():
    console, out = make_console()
    feed(console, '10 GOTO 50', 'RUN')
    assert out == ['Runtime error: UndefinedLine: undefined line 50 in line 10']


def test_new_empties_the_program():
    console, out = make_console()
    feed(console, '10 PRINT 1', 'new', 'LIST')
    assert out == []


def test_bye_ends_session():
    console, _ = make_console()
    assert console.handle_line('BYE') is False


def test_save_and_load(tmp_path):
    path = tmp_path / 'prog.bas'
    console, out = make_console()
    feed(console, '10 INPUT N', '20 PRINT N+1', f'SAVE "{path}"', 'NEW', f'load "{path}"')
    assert path.read_text(encoding='utf-8') == '10 INPUT N\n20 PRINT N+1\n'
    console.interpreter.input_fn = lambda prompt: '41'
    feed(console, 'RUN')
    assert out == ['42']


def test_load_reports_bad_lines_and_keeps_good_ones(tmp_path):
    path = tmp_path / 'bad.bas'
    path.write_text('10 PRINT 1\n20 WHAT\n30 PRINT 3\n', encoding='utf-8')
    console, out = make_console()
    feed(console, '99 PRINT 99', f'LOAD "{path}"', 'RUN')
    assert out[0].startswith('Syntax error: unknown keyword')
    assert out[1:] == ['1', '3']


def test_load_missing_file(tmp_path):
    console, out = make_console()
    feed(console, f'LOAD "{tmp_path / "missing.bas"}"')
    assert out[0].startswith('Error: file')


def test_loop_until_end_of_input():
    lines = iter(['10 PRINT 7', 'RUN'])

    def read_line(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    out = []
    console = Console(Interpreter(output=out.append), read_line=read_line)
    console.loop()
    assert out == ['Ready.', '7']


def test_deeply_nested_line_is_reported():
    console, out = make_console()
    feed(console, 'PRINT ' + '(' * 400 + '1' + ')' * 400, 'PRINT 1')
    assert out == ['Syntax error: expression too deeply nested', '1']
