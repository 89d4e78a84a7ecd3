from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from loopy.ast import AstNode, FunctionCall
from loopy.state import State

if TYPE_CHECKING:
    from loopy.interpreter import Evaluator


class BuiltinFunction(ABC):
    """A native routine callable from Loopy source by name."""
    name: str = ''

    @abstractmethod
    def invoke(self, evaluator: 'Evaluator', state: State, call: AstNode[FunctionCall]) -> int:
        ...

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
