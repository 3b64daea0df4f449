"""Interactive command surface.

Each line typed at the console is one of:

* ``LOAD "file"`` / ``SAVE "file"`` - replace the program from a file, or
  write it out,
* ``NEW`` - empty the program,
* ``BYE`` - leave the console,
* a numbered line - insert, replace or (with an empty body) delete that
  line of the program,
* anything else - a statement executed immediately (``RUN`` and ``LIST``
  are ordinary statements).

Errors are reported on the output sink and never end the session.
"""

from __future__ import annotations

import builtins
import re
from typing import Callable, Optional

from .errors import BasicError, LexerError, StorageError
from .interpreter import Interpreter
from .parser import parse_line
from .storage import load_file, save_file
from .types import AbortedAt, RunResult


FILE_COMMAND_RE = re.compile(r'\s*(LOAD|SAVE)\s+"([^"]+)"\s*$', re.IGNORECASE)
WORD_COMMAND_RE = re.compile(r'\s*(NEW|BYE)\s*$', re.IGNORECASE)


def describe_error(err: BasicError) -> str:
    if isinstance(err, LexerError):
        return f"Lexical error: {err}"
    if isinstance(err, StorageError):
        return f"Error: {err}"
    return f"Syntax error: {err}"


class Console:
    def __init__(self, interpreter: Optional[Interpreter] = None,
                 read_line: Optional[Callable[[str], str]] = None):
        self.interpreter = interpreter if interpreter is not None else Interpreter()
        self.read_line = read_line

    @property
    def program(self):
        return self.interpreter.program

    def write(self, text: str):
        self.interpreter.output(text)

    def report(self, result: RunResult):
        if isinstance(result, AbortedAt):
            self.write(str(result))

    def handle_line(self, text: str) -> bool:
        """Process one console line; returns False when the session ends."""
        m = WORD_COMMAND_RE.match(text)
        if m:
            if m.group(1).upper() == 'BYE':
                return False
            self.program.clear()
            self.interpreter.context.reset()
            return True
        m = FILE_COMMAND_RE.match(text)
        if m:
            command, path = m.group(1).upper(), m.group(2)
            try:
                if command == 'LOAD':
                    self.load(path)
                else:
                    save_file(self.program, path)
            except StorageError as e:
                self.write(describe_error(e))
            return True
        try:
            number, stmt = parse_line(text)
        except BasicError as e:
            self.write(describe_error(e))
            return True
        if number is not None:
            self.program.update(number, stmt)
        elif stmt is not None:
            self.report(self.interpreter.execute_immediate(stmt))
        return True

    def load(self, path: str):
        loaded = load_file(path)
        for _, err in loaded.failures:
            self.write(describe_error(err))
        self.program.clear()
        for line, stmt in loaded.program.ascending():
            self.program.insert_or_replace(line, stmt)
        self.interpreter.context.reset()

    def loop(self):
        self.write("Ready.")
        while True:
            read_line = self.read_line or builtins.input
            try:
                text = read_line('')
            except EOFError:
                break
            if not self.handle_line(text):
                break
