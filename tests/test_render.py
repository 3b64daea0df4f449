import pytest

from tinybasic.parser import parse_statement
from tinybasic.render import render_line, render_statement


@pytest.mark.parametrize('source, expected', [
    ('let a = 1 + 2 * 3', 'LET A=1+2*3'),
    ('LET A=(1+2)*3', 'LET A=(1+2)*3'),
    ('LET A=1-(2-3)', 'LET A=1-(2-3)'),
    ('LET A=(1-2)-3', 'LET A=1-2-3'),
    ('LET A=8/(4/2)', 'LET A=8/(4/2)'),
    ('LET A=-(B+C)', 'LET A=-(B+C)'),
    ('LET A=--B', 'LET A=--B'),
    ('X=1', 'LET X=1'),
    ('PRINT "a", A, "b"', 'PRINT "a", A, "b"'),
    ('if a+1 >= b then goto 10*c', 'IF A+1>=B THEN GOTO 10*C'),
    ('FOR I=1 TO 10', 'FOR I=1 TO 10'),
    ('FOR I=10 TO 1 STEP -2', 'FOR I=10 TO 1 STEP -2'),
    ('NEXT I', 'NEXT I'),
    ('NEXT', 'NEXT'),
    ('INPUT A,B', 'INPUT A, B'),
    ('GOSUB 100', 'GOSUB 100'),
    ('REM  spaced   out ', 'REM spaced   out'),
    ('REM', 'REM'),
    ('RETURN', 'RETURN'),
    ('END', 'END'),
    ('LIST', 'LIST'),
    ('RUN', 'RUN'),
    ('CLEAR', 'CLEAR'),
])
def test_render_statement(source, expected):
    rendered = render_statement(parse_statement(source))
    assert rendered == expected
    # rendering is a fixed point of parsing
    assert parse_statement(rendered) == parse_statement(source)


def test_render_line():
    assert render_line(10, parse_statement('end')) == '10 END'
