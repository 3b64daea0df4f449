"""Parser for tinybasic.

Parsing works one source line at a time:

1. **Line splitting**: `parse_line` strips an optional leading line
   number. A numbered line is headed for the program store, an
   unnumbered one is executed immediately.

2. **Parsing**: the body is tokenized (`tinybasic.lexer`) and a
   recursive-descent `Parser` turns the tokens into exactly one
   `Statement`. The then-branch of ``IF`` is parsed by the same entry
   point, so ``IF X=1 THEN GOTO 100`` nests a full statement.

Expression grammar, loosest first::

    condition  := expression RELOP expression        (IF only)
    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := "-" unary | primary
    primary    := NUMBER | IDENT | "(" expression ")"

Every failure is raised as `ParseError` carrying the line number (None
for immediate lines) and a short description. Expressions nested deeper than
`MAX_NESTING` levels are rejected the same way.
"""

from __future__ import annotations

import re
from dataclasses import fields
from typing import Callable, Dict, List, Optional, Tuple

from lark import Token

from .ast import (
    Node, Expr, IntLiteral, StringLiteral, VariableRef, UnaryOp, BinaryOp,
    Statement, RemStmt, PrintStmt, LetStmt, IfStmt, GotoStmt, GosubStmt,
    ReturnStmt, InputStmt, ForStmt, NextStmt, EndStmt, ListStmt, RunStmt,
    ClearStmt,
)
from .errors import LexerError, ParseError
from .lexer import tokenize
from .types import INT_MAX, wrap_int


LINE_NUMBER_RE = re.compile(r'\s*(\d+)')

# tokens that may start an operand; seeing one where an operator belongs
# means an operator is missing
OPERAND_START = ('NUMBER', 'IDENT', 'LPAR', 'STRING')

MAX_NESTING = 100


def describe(token: Optional[Token]) -> str:
    if token is None:
        return 'end of line'
    return repr(token.value)


class Parser:
    def __init__(self, tokens: List[Token], line_number: Optional[int] = None):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0  # open parentheses
        self.line_number = line_number
        self.statements: Dict[str, Callable[[], Statement]] = {
            'REM': self.parse_rem,
            'PRINT': self.parse_print,
            'LET': self.parse_let,
            'IF': self.parse_if,
            'GOTO': self.parse_goto,
            'GOSUB': self.parse_gosub,
            'RETURN': lambda: ReturnStmt(),
            'INPUT': self.parse_input,
            'FOR': self.parse_for,
            'NEXT': self.parse_next,
            'END': lambda: EndStmt(),
            'LIST': lambda: ListStmt(),
            'RUN': lambda: RunStmt(),
            'CLEAR': lambda: ClearStmt(),
        }

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.line_number)

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def match(self, type_: str, value: Optional[str] = None) -> bool:
        token = self.peek()
        if token is None or token.type != type_:
            return False
        return value is None or token.value == value

    def consume(self, type_: str, value: Optional[str] = None, what: Optional[str] = None) -> Token:
        if not self.match(type_, value):
            expected = what or value or type_.lower()
            raise self.error(f"expected {expected}, got {describe(self.peek())}")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    # Statements

    def parse_line_statement(self) -> Statement:
        """Parse the whole token list as one statement."""
        stmt = self.parse_statement()
        if not self.at_end():
            token = self.peek()
            if token.type == 'RPAR':
                raise self.error("unbalanced parenthesis")
            if token.type == 'RELOP':
                raise self.error(f"relational operator {token.value} is only allowed in IF")
            if token.type in OPERAND_START:
                raise self.error(f"missing operator before {describe(token)}")
            raise self.error(f"unexpected {describe(token)}")
        return stmt

    def parse_statement(self) -> Statement:
        token = self.peek()
        if token is None:
            raise self.error("missing statement")
        if token.type == 'KEYWORD' and token.value in self.statements:
            self.pos += 1
            return self.statements[token.value]()
        if token.type == 'IDENT':
            # LET without the keyword
            return self.parse_assignment()
        raise self.error(f"unknown keyword {describe(token)}")

    def parse_rem(self) -> RemStmt:
        if self.match('REMARK'):
            return RemStmt(self.consume('REMARK').value)
        return RemStmt('')

    def parse_print(self) -> PrintStmt:
        items: List[Expr] = []
        while True:
            if self.match('STRING'):
                raw = self.consume('STRING').value
                items.append(StringLiteral(raw[1:-1]))
            else:
                items.append(self.parse_expression())
            if not self.match('COMMA'):
                break
            self.consume('COMMA')
        return PrintStmt(items)

    def parse_let(self) -> LetStmt:
        if not self.match('IDENT'):
            raise self.error(f"expected variable after LET, got {describe(self.peek())}")
        return self.parse_assignment()

    def parse_assignment(self) -> LetStmt:
        var = self.consume('IDENT', what='variable').value
        self.consume('RELOP', '=', what="'='")
        expr = self.parse_expression()
        return LetStmt(var, expr)

    def parse_if(self) -> IfStmt:
        condition = self.parse_condition()
        self.consume('KEYWORD', 'THEN', what='THEN')
        then = self.parse_statement()
        return IfStmt(condition, then)

    def parse_goto(self) -> GotoStmt:
        return GotoStmt(self.parse_expression())

    def parse_gosub(self) -> GosubStmt:
        return GosubStmt(self.parse_expression())

    def parse_input(self) -> InputStmt:
        names = [self.consume('IDENT', what='variable').value]
        while self.match('COMMA'):
            self.consume('COMMA')
            names.append(self.consume('IDENT', what='variable').value)
        return InputStmt(names)

    def parse_for(self) -> ForStmt:
        var = self.consume('IDENT', what='loop variable').value
        self.consume('RELOP', '=', what="'='")
        start = self.parse_expression()
        self.consume('KEYWORD', 'TO', what='TO')
        limit = self.parse_expression()
        step: Optional[Expr] = None
        if self.match('KEYWORD', 'STEP'):
            self.consume('KEYWORD', 'STEP')
            step = self.parse_expression()
        return ForStmt(var, start, limit, step)

    def parse_next(self) -> NextStmt:
        if self.match('IDENT'):
            return NextStmt(self.consume('IDENT').value)
        return NextStmt(None)

    # Expressions

    def parse_condition(self) -> BinaryOp:
        left = self.parse_expression()
        if not self.match('RELOP'):
            raise self.error(f"missing relational operator, got {describe(self.peek())}")
        op = self.consume('RELOP').value
        right = self.parse_expression()
        return BinaryOp(op, left, right)

    def parse_expression(self) -> Expr:
        node = self.parse_term()
        while self.match('ARITHOP', '+') or self.match('ARITHOP', '-'):
            op = self.consume('ARITHOP').value
            right = self.parse_term()
            node = BinaryOp(op, node, right)
        return node

    def parse_term(self) -> Expr:
        node = self.parse_unary()
        while self.match('ARITHOP', '*') or self.match('ARITHOP', '/'):
            op = self.consume('ARITHOP').value
            right = self.parse_unary()
            node = BinaryOp(op, node, right)
        return node

    def parse_unary(self) -> Expr:
        negations = 0
        while self.match('ARITHOP', '-'):
            self.consume('ARITHOP')
            negations += 1
        node = self.parse_primary()
        for _ in range(negations):
            node = UnaryOp('-', node)
        return node

    def parse_primary(self) -> Expr:
        token = self.peek()
        if token is None:
            raise self.error("missing operand at end of line")
        if token.type == 'NUMBER':
            self.pos += 1
            return IntLiteral(wrap_int(int(token.value)))
        if token.type == 'IDENT':
            self.pos += 1
            return VariableRef(token.value)
        if token.type == 'LPAR':
            self.pos += 1
            self.depth += 1
            if self.depth > MAX_NESTING:
                raise self.error("expression too deeply nested")
            expr = self.parse_expression()
            if not self.match('RPAR'):
                raise self.error("unbalanced parenthesis")
            self.consume('RPAR')
            self.depth -= 1
            return expr
        if token.type == 'RPAR':
            raise self.error("unbalanced parenthesis")
        if token.type == 'STRING':
            raise self.error("string literal is only allowed in PRINT")
        raise self.error(f"malformed operand {describe(token)}")


def split_line_number(source: str) -> Tuple[Optional[int], str]:
    """Split ``"10 PRINT A"`` into ``(10, "PRINT A")``.

    Lines without a leading number return ``(None, source)``.
    """
    m = LINE_NUMBER_RE.match(source)
    if m is None:
        return None, source
    return int(m.group(1)), source[m.end():]


def nesting_depth(node: Node) -> int:
    """Depth of the deepest node below `node`, counting `node` as 1."""
    deepest = 0
    pending = [(node, 1)]
    while pending:
        current, depth = pending.pop()
        deepest = max(deepest, depth)
        for f in fields(current):
            value = getattr(current, f.name)
            children = value if isinstance(value, list) else [value]
            pending.extend((child, depth + 1) for child in children if isinstance(child, Node))
    return deepest


def parse_statement(source: str, line_number: Optional[int] = None,
                    column_offset: int = 0) -> Statement:
    """Parse the text of one statement (no line number prefix).

    `column_offset` is the width of the line-number prefix the caller
    stripped, so lexical errors report columns of the full line.
    """
    try:
        tokens = tokenize(source)
    except LexerError as e:
        if line_number is None and column_offset == 0:
            raise
        raise e.with_line(line_number, column_offset) from None
    try:
        stmt = Parser(tokens, line_number).parse_line_statement()
    except RecursionError:
        raise ParseError("expression too deeply nested", line_number) from None
    # deeper trees could not be evaluated or listed
    if nesting_depth(stmt) > MAX_NESTING:
        raise ParseError("expression too deeply nested", line_number)
    return stmt


def parse_line(source: str) -> Tuple[Optional[int], Optional[Statement]]:
    """Parse one line as typed by a user or read from a program file.

    Returns ``(line_number, statement)``. The line number is None for an
    immediate line. The statement is None when the body is empty: for a
    numbered line that means "delete this line", for an unnumbered one
    there is nothing to do.
    """
    number, body = split_line_number(source)
    if number is not None:
        if number <= 0:
            raise ParseError("line number must be positive", number)
        if number > INT_MAX:
            raise ParseError("line number out of range", number)
    if not body.strip():
        return number, None
    return number, parse_statement(body, number, len(source) - len(body))
