"""JSON serialization/deserialization for Loopy ASTs.

This module converts between Loopy AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Spans are kept, so an
AST loaded back from JSON reports errors at the same source locations.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    AstNode,
    FunctionCall,
    Program,
    Number,
    Identifier,
    BinaryOperator,
    Call,
    Assignment,
    Reassignment,
    CallLine,
    Loop,
)
from .errors import Span
from .lexer import Operator


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, AstNode):
        return {"node": ast_to_obj(node.node), "span": [node.span.start, node.span.end]}

    if isinstance(node, Program):
        return {"type": "Program", "lines": [ast_to_obj(line) for line in node.lines]}
    if isinstance(node, FunctionCall):
        return {
            "type": "FunctionCall",
            "name": node.name,
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }

    # Lines
    if isinstance(node, Assignment):
        return {"type": "Assignment", "name": node.name, "expression": ast_to_obj(node.expression)}
    if isinstance(node, Reassignment):
        return {"type": "Reassignment", "name": node.name, "expression": ast_to_obj(node.expression)}
    if isinstance(node, CallLine):
        return {"type": "CallLine", "call": ast_to_obj(node.call)}
    if isinstance(node, Loop):
        return {
            "type": "Loop",
            "condition": ast_to_obj(node.condition),
            "body": [ast_to_obj(line) for line in node.body],
        }

    # Expressions
    if isinstance(node, Number):
        return {"type": "Number", "value": node.value}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name}
    if isinstance(node, BinaryOperator):
        return {
            "type": "BinaryOperator",
            "op": node.op.value,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Call):
        return {"type": "Call", "call": ast_to_obj(node.call)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    if "span" in obj:
        start, end = obj["span"]
        return AstNode(ast_from_obj(obj["node"]), Span(int(start), int(end)))

    t = obj.get("type")
    if t == "Program":
        return Program(lines=[ast_from_obj(line) for line in obj["lines"]])
    if t == "FunctionCall":
        return FunctionCall(name=obj["name"], arguments=[ast_from_obj(a) for a in obj["arguments"]])
    if t == "Assignment":
        return Assignment(name=obj["name"], expression=ast_from_obj(obj["expression"]))
    if t == "Reassignment":
        return Reassignment(name=obj["name"], expression=ast_from_obj(obj["expression"]))
    if t == "CallLine":
        return CallLine(call=ast_from_obj(obj["call"]))
    if t == "Loop":
        return Loop(condition=ast_from_obj(obj["condition"]), body=[ast_from_obj(line) for line in obj["body"]])
    if t == "Number":
        return Number(value=int(obj["value"]))
    if t == "Identifier":
        return Identifier(name=obj["name"])
    if t == "BinaryOperator":
        return BinaryOperator(
            left=ast_from_obj(obj["left"]),
            op=Operator(obj["op"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Call":
        return Call(call=ast_from_obj(obj["call"]))

    raise ValueError(f"Unknown AST node type: {t}")
