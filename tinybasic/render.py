"""Canonical source text for statements and expressions.

Used by ``LIST`` and by `tinybasic.storage.save_program`. Parentheses are
emitted only where precedence or left associativity requires them, so
parsing the rendered text gives back an equal tree.
"""

from __future__ import annotations

from .ast import (
    Expr, IntLiteral, StringLiteral, VariableRef, UnaryOp, BinaryOp,
    Statement, RemStmt, PrintStmt, LetStmt, IfStmt, GotoStmt, GosubStmt,
    ReturnStmt, InputStmt, ForStmt, NextStmt, EndStmt, ListStmt, RunStmt,
    ClearStmt, REL_OPS,
)


PRECEDENCE = {'+': 2, '-': 2, '*': 3, '/': 3}
PRECEDENCE.update({op: 1 for op in REL_OPS})
UNARY_PRECEDENCE = 4
ATOM_PRECEDENCE = 5


def precedence(node: Expr) -> int:
    if isinstance(node, BinaryOp):
        return PRECEDENCE[node.op]
    if isinstance(node, UnaryOp):
        return UNARY_PRECEDENCE
    return ATOM_PRECEDENCE


def render_expr(node: Expr) -> str:
    if isinstance(node, IntLiteral):
        return str(node.value)
    if isinstance(node, StringLiteral):
        return f'"{node.value}"'
    if isinstance(node, VariableRef):
        return node.name
    if isinstance(node, UnaryOp):
        operand = render_expr(node.operand)
        if isinstance(node.operand, BinaryOp):
            operand = f'({operand})'
        return f'{node.op}{operand}'
    if isinstance(node, BinaryOp):
        prec = PRECEDENCE[node.op]
        left = render_expr(node.left)
        if precedence(node.left) < prec:
            left = f'({left})'
        right = render_expr(node.right)
        # operators are left associative: an equal-precedence right operand
        # was parenthesized in the source
        if precedence(node.right) <= prec:
            right = f'({right})'
        return f'{left}{node.op}{right}'
    raise NotImplementedError(f"render_expr: unexpected node type {type(node)}")


def render_statement(stmt: Statement) -> str:
    if isinstance(stmt, RemStmt):
        return f'REM {stmt.text}' if stmt.text else 'REM'
    if isinstance(stmt, PrintStmt):
        return 'PRINT ' + ', '.join(render_expr(item) for item in stmt.items)
    if isinstance(stmt, LetStmt):
        return f'LET {stmt.var}={render_expr(stmt.expr)}'
    if isinstance(stmt, IfStmt):
        return f'IF {render_expr(stmt.condition)} THEN {render_statement(stmt.then)}'
    if isinstance(stmt, GotoStmt):
        return f'GOTO {render_expr(stmt.target)}'
    if isinstance(stmt, GosubStmt):
        return f'GOSUB {render_expr(stmt.target)}'
    if isinstance(stmt, ReturnStmt):
        return 'RETURN'
    if isinstance(stmt, InputStmt):
        return 'INPUT ' + ', '.join(stmt.vars)
    if isinstance(stmt, ForStmt):
        text = f'FOR {stmt.var}={render_expr(stmt.start)} TO {render_expr(stmt.limit)}'
        if stmt.step is not None:
            text += f' STEP {render_expr(stmt.step)}'
        return text
    if isinstance(stmt, NextStmt):
        return f'NEXT {stmt.var}' if stmt.var else 'NEXT'
    if isinstance(stmt, EndStmt):
        return 'END'
    if isinstance(stmt, ListStmt):
        return 'LIST'
    if isinstance(stmt, RunStmt):
        return 'RUN'
    if isinstance(stmt, ClearStmt):
        return 'CLEAR'
    raise NotImplementedError(f"render_statement: unexpected node type {type(stmt)}")


def render_line(line: int, stmt: Statement) -> str:
    return f'{line} {render_statement(stmt)}'
