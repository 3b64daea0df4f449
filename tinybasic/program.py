"""The program store: statements indexed by line number.

Statements live in a dict keyed by line number, next to a sorted list of
the same keys. Lookup by line number is a dict access; the first line
and the successor of a line are found by binary search over the sorted
keys, so ordering is always numeric and never insertion order.
"""

from __future__ import annotations

import bisect
from typing import Dict, Iterator, List, Optional, Tuple

from .ast import Statement


class ProgramStore:
    def __init__(self):
        self._statements: Dict[int, Statement] = {}
        self._lines: List[int] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, line: int) -> bool:
        return line in self._statements

    def __iter__(self) -> Iterator[Tuple[int, Statement]]:
        return self.ascending()

    def insert_or_replace(self, line: int, statement: Statement):
        if line <= 0:
            raise ValueError(f'line number must be positive, got {line}')
        if line not in self._statements:
            bisect.insort(self._lines, line)
        self._statements[line] = statement

    def remove(self, line: int) -> bool:
        """Remove `line`; returns False when there was no such line."""
        if line not in self._statements:
            return False
        del self._statements[line]
        idx = bisect.bisect_left(self._lines, line)
        del self._lines[idx]
        return True

    def update(self, line: int, statement: Optional[Statement]):
        """Apply one edited line: a None body deletes the line."""
        if statement is None:
            self.remove(line)
        else:
            self.insert_or_replace(line, statement)

    def get(self, line: int) -> Optional[Statement]:
        return self._statements.get(line)

    def first_line(self) -> Optional[int]:
        return self._lines[0] if self._lines else None

    def successor_of(self, line: int) -> Optional[int]:
        """The smallest stored line number greater than `line`."""
        idx = bisect.bisect_right(self._lines, line)
        if idx < len(self._lines):
            return self._lines[idx]
        return None

    def lines(self) -> List[int]:
        return list(self._lines)

    def ascending(self) -> Iterator[Tuple[int, Statement]]:
        """Yield ``(line, statement)`` pairs in line order.

        Each call starts a fresh pass over the store.
        """
        for line in list(self._lines):
            yield line, self._statements[line]

    def clear(self):
        self._statements.clear()
        self._lines.clear()
