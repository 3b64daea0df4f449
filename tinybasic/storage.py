"""Loading and saving programs as line-oriented text.

The text format is one record per line, ``<line number> <statement>``,
in exactly the syntax the parser accepts, so a saved program can be
edited by hand and loaded back. Blank lines are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import BasicError, ParseError, StorageError
from .parser import parse_line
from .program import ProgramStore
from .render import render_line


@dataclass
class LoadResult:
    """A freshly populated store plus every line that failed to parse.

    Each failure is ``(line_number, error)``; the line number is None
    when the record had no usable line number.
    """
    program: ProgramStore
    failures: List[Tuple[Optional[int], BasicError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def load_source(source: str) -> LoadResult:
    """Parse program text into a new `ProgramStore`.

    A bad line is recorded and skipped; it never stops the remaining
    lines from loading.
    """
    result = LoadResult(ProgramStore())
    for text in source.splitlines():
        if not text.strip():
            continue
        try:
            number, stmt = parse_line(text)
        except BasicError as e:
            result.failures.append((getattr(e, 'line_number', None), e))
            continue
        if number is None:
            result.failures.append((None, ParseError(f"missing line number: {text.strip()}")))
            continue
        result.program.update(number, stmt)
    return result


def save_program(program: ProgramStore) -> str:
    """Render the program in ascending line order."""
    return ''.join(render_line(line, stmt) + '\n' for line, stmt in program.ascending())


def load_file(path: str) -> LoadResult:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
    except FileNotFoundError:
        raise StorageError(f'file {path} not found') from None
    except OSError as e:
        raise StorageError(f'error reading {path}: {e.strerror}') from None
    return load_source(source)


def save_file(program: ProgramStore, path: str):
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(save_program(program))
    except OSError as e:
        raise StorageError(f'error writing {path}: {e.strerror}') from None
