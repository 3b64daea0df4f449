"""JSON serialization/deserialization for tinybasic programs.

This module converts between a `ProgramStore` full of AST dataclasses and
plain Python dict/list structures suitable for JSON encoding. Every node
becomes an object with a ``type`` key naming its class; the round trip
is exact for all node types.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    IntLiteral,
    StringLiteral,
    VariableRef,
    UnaryOp,
    BinaryOp,
    RemStmt,
    PrintStmt,
    LetStmt,
    IfStmt,
    GotoStmt,
    GosubStmt,
    ReturnStmt,
    InputStmt,
    ForStmt,
    NextStmt,
    EndStmt,
    ListStmt,
    RunStmt,
    ClearStmt,
)
from .program import ProgramStore


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    # Expressions
    if isinstance(node, IntLiteral):
        return {"type": "IntLiteral", "value": node.value}
    if isinstance(node, StringLiteral):
        return {"type": "StringLiteral", "value": node.value}
    if isinstance(node, VariableRef):
        return {"type": "VariableRef", "name": node.name}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "op": node.op,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }

    # Statements
    if isinstance(node, RemStmt):
        return {"type": "RemStmt", "text": node.text}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "items": [ast_to_obj(i) for i in node.items]}
    if isinstance(node, LetStmt):
        return {"type": "LetStmt", "var": node.var, "expr": ast_to_obj(node.expr)}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then": ast_to_obj(node.then),
        }
    if isinstance(node, GotoStmt):
        return {"type": "GotoStmt", "target": ast_to_obj(node.target)}
    if isinstance(node, GosubStmt):
        return {"type": "GosubStmt", "target": ast_to_obj(node.target)}
    if isinstance(node, InputStmt):
        return {"type": "InputStmt", "vars": list(node.vars)}
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "var": node.var,
            "start": ast_to_obj(node.start),
            "limit": ast_to_obj(node.limit),
            "step": ast_to_obj(node.step),
        }
    if isinstance(node, NextStmt):
        return {"type": "NextStmt", "var": node.var}
    if isinstance(node, (ReturnStmt, EndStmt, ListStmt, RunStmt, ClearStmt)):
        return {"type": type(node).__name__}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict) or "type" not in obj:
        raise ValueError(f"Invalid AST object: {obj!r}")

    t = obj["type"]
    if t == "IntLiteral":
        return IntLiteral(int(obj["value"]))
    if t == "StringLiteral":
        return StringLiteral(obj["value"])
    if t == "VariableRef":
        return VariableRef(obj["name"])
    if t == "UnaryOp":
        return UnaryOp(obj["op"], ast_from_obj(obj["operand"]))
    if t == "BinaryOp":
        return BinaryOp(obj["op"], ast_from_obj(obj["left"]), ast_from_obj(obj["right"]))
    if t == "RemStmt":
        return RemStmt(obj.get("text", ""))
    if t == "PrintStmt":
        return PrintStmt([ast_from_obj(i) for i in obj["items"]])
    if t == "LetStmt":
        return LetStmt(obj["var"], ast_from_obj(obj["expr"]))
    if t == "IfStmt":
        return IfStmt(ast_from_obj(obj["condition"]), ast_from_obj(obj["then"]))
    if t == "GotoStmt":
        return GotoStmt(ast_from_obj(obj["target"]))
    if t == "GosubStmt":
        return GosubStmt(ast_from_obj(obj["target"]))
    if t == "InputStmt":
        return InputStmt(list(obj["vars"]))
    if t == "ForStmt":
        return ForStmt(
            obj["var"],
            ast_from_obj(obj["start"]),
            ast_from_obj(obj["limit"]),
            ast_from_obj(obj.get("step")),
        )
    if t == "NextStmt":
        return NextStmt(obj.get("var"))
    if t == "ReturnStmt":
        return ReturnStmt()
    if t == "EndStmt":
        return EndStmt()
    if t == "ListStmt":
        return ListStmt()
    if t == "RunStmt":
        return RunStmt()
    if t == "ClearStmt":
        return ClearStmt()

    raise ValueError(f"Unknown AST node type: {t}")


def program_to_obj(program: ProgramStore) -> Dict[str, Any]:
    return {
        "type": "Program",
        "lines": [{"line": line, "stmt": ast_to_obj(stmt)} for line, stmt in program.ascending()],
    }


def program_from_obj(obj: Dict[str, Any]) -> ProgramStore:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise ValueError(f"Invalid program object: {obj!r}")
    program = ProgramStore()
    for entry in obj["lines"]:
        program.insert_or_replace(int(entry["line"]), ast_from_obj(entry["stmt"]))
    return program
