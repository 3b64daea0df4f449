"""Statement executor for tinybasic.

The `Interpreter` is the control-flow engine. It owns one
`ExecutionContext` (variables, GOSUB stack, FOR stack and the program
pointer) and drives the statements of a `ProgramStore` with an explicit
pointer and an iterative loop:

1. a pointer with no line in the store halts the run (normal completion),
2. the statement at the pointer is fetched and its fall-through line is
   the store's successor of the pointer,
3. the statement is dispatched; dispatch returns the new pointer, or
   None to halt.

Only the then-branch of ``IF`` is dispatched recursively. A runtime error
aborts the run and is reported as ``AbortedAt(line, error)``; the program
store is never modified by execution.

Debug information is written to `debug.txt` (or `debug_file`) when
`debug_level` is greater than zero:

* 1 - run start, completion and aborts
* 2 - every executed line
* 3 - jumps, stack pushes and pops, input retries
* 4 - variable stores
"""

from __future__ import annotations

import builtins
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .ast import (
    Statement, RemStmt, PrintStmt, LetStmt, IfStmt, GotoStmt, GosubStmt,
    ReturnStmt, InputStmt, ForStmt, NextStmt, EndStmt, ListStmt, RunStmt,
    ClearStmt, Expr,
)
from .environment import Environment
from .errors import (
    BasicRuntimeError, UNDEFINED_LINE, RETURN_WITHOUT_GOSUB, NEXT_WITHOUT_FOR,
    END_OF_INPUT,
)
from .evaluator import evaluate, render_value
from .program import ProgramStore
from .render import render_line, render_statement
from .storage import load_source
from .types import AbortedAt, Completed, ErrorVal, ForFrame, RunResult, wrap_int


INTEGER_RE = re.compile(r'\s*([+-]?\d+)\s*$')


@dataclass
class ExecutionContext:
    """Everything a run mutates, apart from the output sink."""
    program: ProgramStore
    env: Environment = field(default_factory=Environment)
    gosub_stack: List[Optional[int]] = field(default_factory=list)
    for_stack: List[ForFrame] = field(default_factory=list)
    pointer: Optional[int] = None  # None means halted

    def reset(self):
        self.env.clear()
        self.gosub_stack.clear()
        self.for_stack.clear()


class Interpreter:
    """Executes tinybasic programs held in a `ProgramStore`."""
    def __init__(self, program: Optional[ProgramStore] = None,
                 output: Optional[Callable[[str], None]] = None,
                 input_fn: Optional[Callable[[str], str]] = None,
                 prompt: str = '? ',
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.program = program if program is not None else ProgramStore()
        self.context = ExecutionContext(self.program)
        self.output = output or print
        self.input_fn = input_fn
        self.prompt = prompt
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    @property
    def env(self) -> Environment:
        return self.context.env

    @property
    def halted(self) -> bool:
        return self.context.pointer is None

    # Public API
    def run(self) -> RunResult:
        """Run the stored program from its first line with fresh state."""
        if self.debug_level >= 1:
            self.debug(f"run: {len(self.program)} lines")
        self.restart()
        return self.drive()

    def restart(self):
        self.context.reset()
        self.context.pointer = self.program.first_line()

    def execute_immediate(self, stmt: Statement) -> RunResult:
        """Execute an unnumbered statement without resetting any state.

        A statement that moves the pointer into the program (GOTO, GOSUB,
        RETURN, RUN) continues as a run from there.
        """
        try:
            pointer = self.execute(stmt, None)
        except BasicRuntimeError as e:
            if self.debug_level >= 1:
                self.debug(f"immediate: aborted: {e.err}")
            return AbortedAt(None, e.err)
        self.context.pointer = pointer
        return self.drive()

    def drive(self) -> RunResult:
        while self.context.pointer is not None:
            line = self.context.pointer
            try:
                self.step()
            except BasicRuntimeError as e:
                self.context.pointer = None
                if self.debug_level >= 1:
                    self.debug(f"aborted in line {line}: {e.err}")
                return AbortedAt(line, e.err)
        if self.debug_level >= 1:
            self.debug("completed")
        return Completed()

    def step(self):
        """Execute the statement at the pointer and move the pointer."""
        line = self.context.pointer
        stmt = self.program.get(line)
        if stmt is None:
            # ran past the end of the program
            self.context.pointer = None
            return
        next_line = self.program.successor_of(line)
        if self.debug_level >= 2:
            self.debug(render_line(line, stmt))
        self.context.pointer = self.execute(stmt, next_line)

    def list_program(self) -> List[str]:
        return [render_line(line, stmt) for line, stmt in self.program.ascending()]

    # Dispatch
    def execute(self, stmt: Statement, next_line: Optional[int]) -> Optional[int]:
        """Execute one statement and return the new pointer."""
        ctx = self.context
        if isinstance(stmt, RemStmt):
            return next_line
        if isinstance(stmt, PrintStmt):
            # evaluate every item before emitting anything
            text = ''.join(render_value(item, ctx.env) for item in stmt.items)
            self.output(text)
            return next_line
        if isinstance(stmt, LetStmt):
            self.store(stmt.var, evaluate(stmt.expr, ctx.env))
            return next_line
        if isinstance(stmt, IfStmt):
            cond = evaluate(stmt.condition, ctx.env)
            if self.debug_level >= 3:
                self.debug(f"if {render_statement(stmt.then)}: condition -> {cond}")
            if cond != 0:
                return self.execute(stmt.then, next_line)
            return next_line
        if isinstance(stmt, GotoStmt):
            return self.jump_target(stmt.target)
        if isinstance(stmt, GosubStmt):
            target = self.jump_target(stmt.target)
            ctx.gosub_stack.append(next_line)
            if self.debug_level >= 3:
                self.debug(f"gosub {target}: push {next_line} (depth {len(ctx.gosub_stack)})")
            return target
        if isinstance(stmt, ReturnStmt):
            if not ctx.gosub_stack:
                raise BasicRuntimeError(ErrorVal(RETURN_WITHOUT_GOSUB, 'RETURN without GOSUB'))
            address = ctx.gosub_stack.pop()
            if self.debug_level >= 3:
                self.debug(f"return to {address}")
            return address
        if isinstance(stmt, InputStmt):
            for name in stmt.vars:
                self.store(name, self.read_integer(name))
            return next_line
        if isinstance(stmt, ForStmt):
            return self.execute_for(stmt, next_line)
        if isinstance(stmt, NextStmt):
            return self.execute_next(stmt, next_line)
        if isinstance(stmt, EndStmt):
            return None
        if isinstance(stmt, ListStmt):
            for text in self.list_program():
                self.output(text)
            return next_line
        if isinstance(stmt, RunStmt):
            if self.debug_level >= 1:
                self.debug("run: restart")
            self.restart()
            return self.context.pointer
        if isinstance(stmt, ClearStmt):
            ctx.reset()
            return next_line
        raise NotImplementedError(f"execute: unexpected node type {type(stmt)}")

    def store(self, name: str, value: int):
        self.context.env.set(name, value)
        if self.debug_level >= 4:
            self.debug(f"{name} = {self.context.env.get(name)}")

    def jump_target(self, target: Expr) -> int:
        line = evaluate(target, self.context.env)
        if line not in self.program:
            raise BasicRuntimeError(ErrorVal(UNDEFINED_LINE, f'undefined line {line}'))
        if self.debug_level >= 3:
            self.debug(f"jump to {line}")
        return line

    def read_integer(self, name: str) -> int:
        """Request values from the input source until one is an integer."""
        while True:
            input_fn = self.input_fn or builtins.input
            try:
                raw = input_fn(self.prompt)
            except EOFError:
                raise BasicRuntimeError(ErrorVal(END_OF_INPUT, f'no input for {name}')) from None
            m = INTEGER_RE.match(raw)
            if m is not None:
                return wrap_int(int(m.group(1)))
            if self.debug_level >= 3:
                self.debug(f"input {name}: rejected {raw!r}")

    def execute_for(self, stmt: ForStmt, next_line: Optional[int]) -> Optional[int]:
        ctx = self.context
        start = evaluate(stmt.start, ctx.env)
        limit = evaluate(stmt.limit, ctx.env)
        step = evaluate(stmt.step, ctx.env) if stmt.step is not None else 1
        self.store(stmt.var, start)
        # re-entering a loop discards its old frame and everything inside it
        for idx in range(len(ctx.for_stack) - 1, -1, -1):
            if ctx.for_stack[idx].variable == stmt.var:
                del ctx.for_stack[idx:]
                break
        ctx.for_stack.append(ForFrame(stmt.var, limit, step, next_line))
        if self.debug_level >= 3:
            self.debug(f"for {stmt.var}: {start} to {limit} step {step} (depth {len(ctx.for_stack)})")
        return next_line

    def execute_next(self, stmt: NextStmt, next_line: Optional[int]) -> Optional[int]:
        stack = self.context.for_stack
        if stmt.var is not None:
            # inner loops left without their NEXT are abandoned
            while stack and stack[-1].variable != stmt.var:
                frame = stack.pop()
                if self.debug_level >= 3:
                    self.debug(f"next {stmt.var}: drop loop {frame.variable}")
        if not stack:
            name = f' {stmt.var}' if stmt.var else ''
            raise BasicRuntimeError(ErrorVal(NEXT_WITHOUT_FOR, f'NEXT{name} without FOR'))
        frame = stack[-1]
        # the loop test sees the unwrapped sum; only the stored value wraps
        value = self.context.env.get(frame.variable) + frame.step
        self.store(frame.variable, value)
        if frame.should_continue(value):
            return frame.body_entry_line
        stack.pop()
        if self.debug_level >= 3:
            self.debug(f"next {frame.variable}: loop done")
        return next_line


def run_program(source: str, output: Optional[Callable[[str], None]] = None,
                input_fn: Optional[Callable[[str], str]] = None,
                debug_level: int = 0) -> RunResult:
    """Convenience function to load and run a program from source text.

    The first line that fails to parse is raised.
    """
    loaded = load_source(source)
    if loaded.failures:
        raise loaded.failures[0][1]
    interpreter = Interpreter(loaded.program, output=output, input_fn=input_fn,
                              debug_level=debug_level)
    try:
        return interpreter.run()
    finally:
        interpreter.close()
