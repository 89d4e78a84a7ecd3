from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from .builtin_function import BuiltinFunction


@dataclass
class State:
    """The single flat environment of one program run."""
    variables: Dict[str, int] = field(default_factory=dict)
    functions: Dict[str, 'BuiltinFunction'] = field(default_factory=dict)

    def format_variables(self) -> str:
        inner = ', '.join(f"{name}: {value}" for name, value in self.variables.items())
        return '{' + inner + '}'
