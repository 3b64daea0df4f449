from pathlib import Path

from tinybasic.interpreter import Interpreter
from tinybasic.storage import load_source
from tinybasic.types import AbortedAt

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10_division_by_zero(capsys):
    with open(EXAMPLES / 'program_10.bas', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter(load_source(source).program)
    result = interp.run()
    out_lines = capsys.readouterr().out.strip().split('\n')
    # nothing from line 40, and line 50 never runs
    assert out_lines == ['before']
    assert isinstance(result, AbortedAt)
    assert result.line == 40
    assert result.error.name == 'DivisionByZero'
