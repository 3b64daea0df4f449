from pathlib import Path

from tinybasic.interpreter import Interpreter
from tinybasic.storage import load_source
from tinybasic.types import Completed

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1(capsys):
    with open(EXAMPLES / 'program_1.bas', 'r', encoding='utf-8') as f:
        source = f.read()
    loaded = load_source(source)
    interp = Interpreter(loaded.program)
    result = interp.run()
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['Hello World!!']
    assert result == Completed()
