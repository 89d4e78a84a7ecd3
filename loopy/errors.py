"""Source spans and the error type shared by every phase of Loopy.

Tokenizing, parsing and evaluating all report failures as a `SpanError`:
a message paired with the half-open `[start, end)` range of source text
that caused it. `format_error` turns such an error back into a
human-readable diagnostic pointing at the offending line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Span:
    """Half-open offset range `[start, end)` into the program source."""
    start: int
    end: int

    def __repr__(self) -> str:
        return f"Span({self.start}, {self.end})"


class SpanError(Exception):
    """An error message located in the source by a span."""
    def __init__(self, message: str, span: Span):
        super().__init__(message)
        self.message = message
        self.span = span

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpanError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message and self.span == other.span

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.span))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, {self.span!r})"


class LexerError(SpanError):
    pass


class ParseError(SpanError):
    pass


class EvaluationError(SpanError):
    pass


def line_info(text: str, index: int) -> Tuple[int, int, str]:
    """Return the 1-based line, 1-based column and line text for `index`."""
    line = 1
    column = 1
    start = 0
    for i, c in enumerate(text):
        if c == '\n':
            if i >= index:
                return line, column, text[start:i]
            line += 1
            column = 1
            start = i + 1
        elif i < index:
            column += 1
    return line, column, text[start:]


def format_error(error: SpanError, source: str) -> str:
    line, column, text = line_info(source, error.span.start)
    return f"{error.message}, on line {line} char {column}:\n{text}"
