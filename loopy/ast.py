"""Abstract Syntax Tree (AST) definitions for the Loopy language.

Every syntactic construct is wrapped in an `AstNode`, which pairs it with
the `Span` of source text it was parsed from. The evaluator uses these
spans to locate runtime errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, TypeVar

from .errors import Span
from .lexer import Operator

T = TypeVar('T')


@dataclass
class AstNode(Generic[T]):
    node: T
    span: Span


@dataclass
class Expression:
    """Base class for expression nodes."""
    pass


@dataclass
class Line:
    """Base class for statement nodes."""
    pass


@dataclass
class FunctionCall:
    name: str
    arguments: List[AstNode[Expression]]


@dataclass
class Number(Expression):
    value: int


@dataclass
class Identifier(Expression):
    name: str


@dataclass
class BinaryOperator(Expression):
    left: AstNode[Expression]
    op: Operator
    right: AstNode[Expression]


@dataclass
class Call(Expression):
    call: AstNode[FunctionCall]


@dataclass
class Assignment(Line):
    name: str
    expression: AstNode[Expression]


@dataclass
class Reassignment(Line):
    name: str
    expression: AstNode[Expression]


@dataclass
class CallLine(Line):
    call: AstNode[FunctionCall]


@dataclass
class Loop(Line):
    condition: AstNode[Expression]
    body: List[AstNode[Line]]


@dataclass
class Program:
    lines: List[AstNode[Line]]
