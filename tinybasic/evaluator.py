"""Expression evaluation for tinybasic.

`evaluate` walks an expression tree against an `Environment` and
produces an integer. Binary operators evaluate the left operand fully,
then the right one, then combine. Relational operators yield 1 (true)
or 0 (false). Arithmetic follows the integer model of `tinybasic.types`.
"""

from __future__ import annotations

from .ast import Expr, IntLiteral, StringLiteral, VariableRef, UnaryOp, BinaryOp
from .environment import Environment
from .errors import BasicRuntimeError, DIVISION_BY_ZERO, TYPE_ERROR
from .types import ErrorVal, trunc_div, wrap_int


def evaluate(node: Expr, env: Environment) -> int:
    if isinstance(node, IntLiteral):
        return node.value
    if isinstance(node, VariableRef):
        return env.get(node.name)
    if isinstance(node, UnaryOp):
        operand = evaluate(node.operand, env)
        if node.op == '-':
            return wrap_int(-operand)
        raise BasicRuntimeError(ErrorVal(TYPE_ERROR, f'unsupported unary operator {node.op}'))
    if isinstance(node, BinaryOp):
        left = evaluate(node.left, env)
        right = evaluate(node.right, env)
        return apply_binary_op(node.op, left, right)
    if isinstance(node, StringLiteral):
        raise BasicRuntimeError(ErrorVal(TYPE_ERROR, 'string used where a number is expected'))
    raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")


def apply_binary_op(op: str, a: int, b: int) -> int:
    if op == '+':
        return wrap_int(a + b)
    if op == '-':
        return wrap_int(a - b)
    if op == '*':
        return wrap_int(a * b)
    if op == '/':
        if b == 0:
            raise BasicRuntimeError(ErrorVal(DIVISION_BY_ZERO, 'division by zero'))
        return trunc_div(a, b)
    if op == '=': return 1 if a == b else 0
    if op == '<>': return 1 if a != b else 0
    if op == '<': return 1 if a < b else 0
    if op == '>': return 1 if a > b else 0
    if op == '<=': return 1 if a <= b else 0
    if op == '>=': return 1 if a >= b else 0
    raise BasicRuntimeError(ErrorVal(TYPE_ERROR, f'unknown operator {op}'))


def render_value(node: Expr, env: Environment) -> str:
    """Text of one PRINT item: strings pass through, expressions evaluate."""
    if isinstance(node, StringLiteral):
        return node.value
    return str(evaluate(node, env))
