from typing import Optional
from tinybasic.types import ErrorVal


# Runtime error names
UNDEFINED_LINE = 'UndefinedLine'
DIVISION_BY_ZERO = 'DivisionByZero'
RETURN_WITHOUT_GOSUB = 'ReturnWithoutGosub'
NEXT_WITHOUT_FOR = 'NextWithoutFor'
END_OF_INPUT = 'EndOfInput'
TYPE_ERROR = 'TypeError'


class BasicError(Exception):
    """Base class for every error raised by tinybasic."""


class LexerError(BasicError):
    """An unrecognized character in a source line."""
    def __init__(self, char: str, column: int, line_number: Optional[int] = None):
        message = f"unexpected character {char!r} at column {column}"
        if line_number is not None:
            message += f" in line {line_number}"
        super().__init__(message)
        self.char = char
        self.column = column
        self.line_number = line_number

    def with_line(self, line_number: Optional[int], offset: int = 0) -> 'LexerError':
        """Same error located in the full line; `offset` is the width of the line-number prefix."""
        return LexerError(self.char, self.column + offset, line_number)


class ParseError(BasicError):
    """A malformed statement. `line_number` is None for immediate lines."""
    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} in line {line_number}")
        self.message = message
        self.line_number = line_number

    def with_line(self, line_number: int) -> 'ParseError':
        return ParseError(self.message, line_number)


class BasicRuntimeError(BasicError):
    """Exception type used to propagate runtime errors out of a statement."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name


class StorageError(BasicError):
    """Reading or writing a program file failed."""
