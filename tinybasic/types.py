"""Runtime value types and helpers for tinybasic.

This module defines the small set of runtime records shared by the
evaluator, the executor and the command surface: the error record
carried by runtime errors, the for-loop frame, the result of a run, and
the helpers implementing the integer model.

Integer model: every value is a signed 32-bit integer. Results that
leave the range wrap around modulo 2**32 (two's complement), and
division truncates toward zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


INT_BITS = 32
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


def wrap_int(value: int) -> int:
    """Wrap an arbitrary Python integer into the signed 32-bit range."""
    value &= (1 << INT_BITS) - 1
    if value > INT_MAX:
        value -= 1 << INT_BITS
    return value


def trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero. `b` must be nonzero."""
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return wrap_int(q)


@dataclass(frozen=True)
class ErrorVal:
    """A runtime error record: a stable `name` and a human message."""
    name: str
    message: str

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


@dataclass
class ForFrame:
    """An active FOR loop."""
    variable: str
    limit: int
    step: int
    body_entry_line: Optional[int]

    def should_continue(self, value: int) -> bool:
        if self.step > 0:
            return value <= self.limit
        if self.step < 0:
            return value >= self.limit
        return False


@dataclass(frozen=True)
class Completed:
    """The run reached the end of the program or an END statement."""

    @property
    def ok(self) -> bool:
        return True

    def __str__(self) -> str:
        return 'Completed'


@dataclass(frozen=True)
class AbortedAt:
    """The run stopped on an unrecovered runtime error.

    `line` is None when the error came from an immediate statement.
    """
    line: Optional[int]
    error: ErrorVal

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        if self.line is None:
            return f"Runtime error: {self.error}"
        return f"Runtime error: {self.error} in line {self.line}"


RunResult = Union[Completed, AbortedAt]
