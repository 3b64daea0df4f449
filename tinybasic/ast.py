"""Abstract Syntax Tree (AST) definitions for tinybasic.

A source line parses into exactly one `Statement`. Statements hold
expression trees built from the `Expr` node classes. Every node is a
plain dataclass, so two trees parsed from equivalent source compare
equal, which the persistence round trip relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


REL_OPS = ('=', '<>', '<', '>', '<=', '>=')


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################


@dataclass
class Expr(Node):
    pass


@dataclass
class IntLiteral(Expr):
    value: int


@dataclass
class StringLiteral(Expr):
    value: str  # only legal as a PRINT item


@dataclass
class VariableRef(Expr):
    name: str  # single upper-case letter


@dataclass
class UnaryOp(Expr):
    op: str
    operand: Expr


@dataclass
class BinaryOp(Expr):
    op: str  # arithmetic operator or one of REL_OPS
    left: Expr
    right: Expr


###############################################################################
# Statements
###############################################################################


@dataclass
class Statement(Node):
    pass


@dataclass
class RemStmt(Statement):
    text: str = ''


@dataclass
class PrintStmt(Statement):
    items: List[Expr]


@dataclass
class LetStmt(Statement):
    var: str
    expr: Expr


@dataclass
class IfStmt(Statement):
    condition: BinaryOp  # always a relational BinaryOp
    then: Statement


@dataclass
class GotoStmt(Statement):
    target: Expr


@dataclass
class GosubStmt(Statement):
    target: Expr


@dataclass
class ReturnStmt(Statement):
    pass


@dataclass
class InputStmt(Statement):
    vars: List[str]


@dataclass
class ForStmt(Statement):
    var: str
    start: Expr
    limit: Expr
    step: Optional[Expr] = None


@dataclass
class NextStmt(Statement):
    var: Optional[str] = None  # None closes the innermost loop


@dataclass
class EndStmt(Statement):
    pass


@dataclass
class ListStmt(Statement):
    pass


@dataclass
class RunStmt(Statement):
    pass


@dataclass
class ClearStmt(Statement):
    pass
