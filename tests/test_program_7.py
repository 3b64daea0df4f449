import builtins
from pathlib import Path

from tinybasic.interpreter import Interpreter
from tinybasic.storage import load_source

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_repeat(monkeypatch, capsys):
    """Test program 7: user-driven repetition.

    It asks for a count and echoes a message that many times. We
    simulate user input to supply a count and verify that the output
    matches the expected sequence of lines. The program uses a FOR loop
    from 0 to T-1.
    """
    monkeypatch.setattr(builtins, 'input', lambda prompt='': '4')
    with open(EXAMPLES / 'program_7.bas', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter(load_source(source).program)
    interp.run()
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['echo 0', 'echo 1', 'echo 2', 'echo 3']
