# tinybasic package
# A tree-walking interpreter for a line-numbered, integer-only BASIC.
from .interpreter import run_program, Interpreter
from .errors import BasicError, BasicRuntimeError, LexerError, ParseError
from .parser import parse_line
from .program import ProgramStore
from .storage import load_source, save_program
from .types import AbortedAt, Completed

__all__ = [
    'run_program',
    'Interpreter',
    'BasicError',
    'BasicRuntimeError',
    'LexerError',
    'ParseError',
    'parse_line',
    'ProgramStore',
    'load_source',
    'save_program',
    'AbortedAt',
    'Completed',
]
