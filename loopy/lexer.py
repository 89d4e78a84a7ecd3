"""Tokenizer for the Loopy language.

Source text is turned into a lazy stream of `TokenNode`s, each a `Token`
paired with the `Span` of text it was read from. Tokens are recognised by
an ordered list of rules; the first rule that matches at the cursor wins,
so the order of `default_rules()` encodes lexical priority.

Rules are described with lark terminal definitions: fixed strings are
`PatternStr` terminals and the identifier and integer rules are
`PatternRE` terminals. A regex rule never yields text that is exactly a
keyword, which lets `var` and `while` fall through to their own rules
while `variable` and `whiles` remain identifiers.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from lark.lexer import PatternRE, PatternStr, TerminalDef

from .errors import LexerError, Span, SpanError
from .types import parse_i32

# Token types. Punctuation tokens use their own character as type.
LPAREN = '('
RPAREN = ')'
LBRACE = '{'
RBRACE = '}'
SEMICOLON = ';'
EQUALS = '='
COMMA = ','
OP = 'OP'
VAR = 'VAR'
WHILE = 'WHILE'
INT = 'INT'
IDENT = 'IDENT'
EOF = 'EOF'


class Operator(Enum):
    PLUS = '+'
    MINUS = '-'
    MULTIPLICATION = '*'
    LESS_THAN = '<'


PRECEDENCE: Dict[Operator, int] = {
    Operator.LESS_THAN: 1,
    Operator.PLUS: 2,
    Operator.MINUS: 2,
    Operator.MULTIPLICATION: 3,
}


def operator_precedence(op: Operator) -> int:
    """Binding strength of a binary operator; higher binds tighter."""
    return PRECEDENCE[op]


@dataclass(frozen=True)
class Token:
    type: str
    value: Any = None

    def __str__(self) -> str:
        if self.value is None:
            return self.type
        if isinstance(self.value, Operator):
            return f"{self.type}({self.value.value})"
        return f"{self.type}({self.value!r})"


@dataclass(frozen=True)
class TokenNode:
    token: Token
    span: Span


@dataclass
class TokenizerRule:
    """A lark terminal and the factory building a token from its matched text."""
    terminal: TerminalDef
    factory: Callable[[str], Token]
    regex: 're.Pattern[str]' = field(init=False, repr=False)

    def __post_init__(self):
        self.regex = re.compile(self.terminal.pattern.to_regexp())

    @property
    def is_keyword(self) -> bool:
        pattern = self.terminal.pattern
        return isinstance(pattern, PatternStr) and pattern.value.isalpha()

    @property
    def rejects_keywords(self) -> bool:
        return isinstance(self.terminal.pattern, PatternRE)


def char_rule(name: str, char: str, token: Token) -> TokenizerRule:
    return TokenizerRule(TerminalDef(name, PatternStr(char)), lambda _text: token)


def string_rule(name: str, text: str, token: Token) -> TokenizerRule:
    return TokenizerRule(TerminalDef(name, PatternStr(text)), lambda _text: token)


def regex_rule(name: str, regexp: str, factory: Callable[[str], Token]) -> TokenizerRule:
    return TokenizerRule(TerminalDef(name, PatternRE(regexp)), factory)


def _number(text: str) -> Token:
    value = parse_i32(text)
    if value is None:
        raise OverflowError(text)
    return Token(INT, value)


def default_rules() -> List[TokenizerRule]:
    return [
        char_rule('LPAR', '(', Token(LPAREN)),
        char_rule('RPAR', ')', Token(RPAREN)),
        char_rule('LBRACE', '{', Token(LBRACE)),
        char_rule('RBRACE', '}', Token(RBRACE)),
        char_rule('SEMICOLON', ';', Token(SEMICOLON)),
        char_rule('EQUAL', '=', Token(EQUALS)),
        char_rule('PLUS', '+', Token(OP, Operator.PLUS)),
        char_rule('MINUS', '-', Token(OP, Operator.MINUS)),
        char_rule('STAR', '*', Token(OP, Operator.MULTIPLICATION)),
        char_rule('LESSTHAN', '<', Token(OP, Operator.LESS_THAN)),
        char_rule('COMMA', ',', Token(COMMA)),
        regex_rule('IDENT', r'[a-zA-Z][a-zA-Z0-9_]*', lambda text: Token(IDENT, text)),
        string_rule('VAR', 'var', Token(VAR)),
        string_rule('WHILE', 'while', Token(WHILE)),
        regex_rule('INT', r'[0-9]+', _number),
    ]


class Tokenizer(ABC):
    """One-token-lookahead token stream consumed by the parser."""

    @abstractmethod
    def next(self) -> TokenNode:
        """Consume and return the next token."""

    @abstractmethod
    def peek(self) -> TokenNode:
        """Return the next token without consuming it."""

    def get_empty_span(self) -> Span:
        """Zero-width span at the start of the next token."""
        start = self.peek().span.start
        return Span(start, start)

    def collect_tokens(self) -> List[Token]:
        """Drain the remaining tokens, up to and including EOF."""
        return [node.token for node in self]

    def __iter__(self) -> Iterator[TokenNode]:
        while True:
            node = self.next()
            yield node
            if node.token.type == EOF:
                return


# ASCII only, so offsets of accepted programs are byte offsets
_WHITESPACE = re.compile(r'[ \t\n\r\f\v]+')


class SimpleTokenizer(Tokenizer):
    def __init__(self, data: str, rules: Optional[List[TokenizerRule]] = None):
        self.data = data
        self.cursor = 0
        self.rules = rules if rules is not None else default_rules()
        keywords = [re.escape(rule.terminal.pattern.value) for rule in self.rules if rule.is_keyword]
        self.matches_keyword = re.compile('|'.join(keywords)) if keywords else None
        self.terminated = False
        self._next: Optional[Union[TokenNode, SpanError]] = None

    def _is_keyword(self, text: str) -> bool:
        return self.matches_keyword is not None and self.matches_keyword.fullmatch(text) is not None

    def read(self, start: int) -> TokenNode:
        """Read the token at `start` without moving the cursor."""
        length = len(self.data)
        while True:
            if start >= length:
                if self.terminated:
                    raise LexerError('Cannot read after EOF', Span(start, start))
                return TokenNode(Token(EOF), Span(start, start + 1))
            whitespace = _WHITESPACE.match(self.data, start)
            if whitespace is None:
                break
            start = whitespace.end()

        for rule in self.rules:
            match = rule.regex.match(self.data, start)
            if match is None or match.end() == start:
                continue
            text = match.group()
            if rule.rejects_keywords and self._is_keyword(text):
                continue
            span = Span(start, match.end())
            try:
                token = rule.factory(text)
            except OverflowError:
                raise LexerError(f'Number literal out of range: {text}', span)
            return TokenNode(token, span)

        raise LexerError('Unexpected token!', Span(start, length))

    def _advance(self) -> TokenNode:
        try:
            node = self.read(self.cursor)
        except SpanError as error:
            self.cursor = max(self.cursor, error.span.end)
            raise
        self.cursor = node.span.end
        if node.token.type == EOF and self.cursor >= len(self.data):
            self.terminated = True
        return node

    def next(self) -> TokenNode:
        if self._next is not None:
            pending, self._next = self._next, None
            if isinstance(pending, SpanError):
                raise pending
            return pending
        return self._advance()

    def peek(self) -> TokenNode:
        if self._next is None:
            try:
                self._next = self._advance()
            except SpanError as error:
                self._next = error
        if isinstance(self._next, SpanError):
            raise self._next
        return self._next
