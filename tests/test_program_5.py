from pathlib import Path

from tinybasic.interpreter import Interpreter
from tinybasic.storage import load_source
from tinybasic.types import Completed

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_multiplication_table(capsys):
    with open(EXAMPLES / 'program_5.bas', 'r', encoding='utf-8') as f:
        source = f.read()
    loaded = load_source(source)
    interp = Interpreter(loaded.program)
    result = interp.run()
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        '1x1=1', '1x2=2', '1x3=3',
        '2x1=2', '2x2=4', '2x3=6',
        '3x1=3', '3x2=6', '3x3=9'
    ]
    assert result == Completed()
