import string
from typing import Dict

from tinybasic.errors import BasicRuntimeError
from tinybasic.types import ErrorVal, wrap_int


VARIABLE_NAMES = tuple(string.ascii_uppercase)


class Environment:
    """The 26 integer variables A-Z.

    Every slot conceptually exists; a slot that was never assigned reads
    as 0.
    """
    def __init__(self):
        self.values: Dict[str, int] = {}

    def _check_name(self, name: str) -> str:
        key = name.upper()
        if key not in VARIABLE_NAMES:
            raise BasicRuntimeError(ErrorVal('NameError', f'invalid variable {name}'))
        return key

    def get(self, name: str) -> int:
        return self.values.get(self._check_name(name), 0)

    def set(self, name: str, value: int):
        self.values[self._check_name(name)] = wrap_int(value)

    def clear(self):
        self.values.clear()
