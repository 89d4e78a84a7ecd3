"""Parser for the Loopy language.

Statements are parsed by recursive descent, dispatching on the next
token. Expressions are parsed by precedence climbing over the operator
table in `loopy.lexer`. An operator is taken while its precedence is at
least the current threshold and its right operand is parsed at that
operator's own precedence, so operators of equal precedence group to the
right: `1 - 2 - 3` is `1 - (2 - 3)`.

The parser needs exactly one token of lookahead. The only place it looks
past an already consumed token is after a leading identifier, where `=`
selects a reassignment and anything else a call.
"""

from __future__ import annotations

from typing import List

from .ast import (
    AstNode, Expression, Line, FunctionCall, Program,
    Number, Identifier, BinaryOperator, Call,
    Assignment, Reassignment, CallLine, Loop,
)
from .errors import ParseError, Span
from .lexer import (
    Tokenizer, SimpleTokenizer, TokenNode, operator_precedence,
    LPAREN, RPAREN, LBRACE, RBRACE, SEMICOLON, EQUALS, COMMA,
    OP, VAR, WHILE, INT, IDENT, EOF,
)


def unexpected(node: TokenNode, *expected: str) -> ParseError:
    return ParseError(f"Unexpected token {node.token}, expected: {', '.join(expected)}", node.span)


class Parser:
    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer

    def check(self, token_type: str) -> bool:
        return self.tokenizer.peek().token.type == token_type

    def consume(self, token_type: str) -> TokenNode:
        node = self.tokenizer.next()
        if node.token.type != token_type:
            raise unexpected(node, token_type)
        return node

    def parse(self) -> AstNode[Program]:
        try:
            return self.parse_program()
        except RecursionError:
            # report at the token the parser could not descend into
            raise ParseError('Nested too deeply', self.tokenizer.get_empty_span()) from None

    def parse_program(self) -> AstNode[Program]:
        start = self.tokenizer.get_empty_span()
        end = start.end
        lines: List[AstNode[Line]] = []
        while not self.check(EOF):
            line = self.parse_line()
            end = line.span.end
            lines.append(line)
        self.consume(EOF)
        return AstNode(Program(lines), Span(start.start, end))

    def parse_line(self) -> AstNode[Line]:
        node = self.tokenizer.peek()
        if node.token.type == VAR:
            return self.parse_assignment()
        if node.token.type == WHILE:
            return self.parse_loop()
        if node.token.type == IDENT:
            return self.parse_reassignment_or_call()
        raise unexpected(node, VAR, WHILE, IDENT)

    def parse_assignment(self) -> AstNode[Line]:
        var = self.consume(VAR)
        name = self.consume(IDENT).token.value
        self.consume(EQUALS)
        expression = self.parse_expression()
        semicolon = self.consume(SEMICOLON)
        return AstNode(Assignment(name, expression), Span(var.span.start, semicolon.span.end))

    def parse_loop(self) -> AstNode[Line]:
        keyword = self.consume(WHILE)
        condition = self.parse_expression()
        self.consume(LBRACE)
        body: List[AstNode[Line]] = []
        while not self.check(RBRACE):
            body.append(self.parse_line())
        closing = self.consume(RBRACE)
        return AstNode(Loop(condition, body), Span(keyword.span.start, closing.span.end))

    def parse_reassignment_or_call(self) -> AstNode[Line]:
        identifier = self.consume(IDENT)
        name = identifier.token.value

        if self.check(EQUALS):
            self.consume(EQUALS)
            expression = self.parse_expression()
            semicolon = self.consume(SEMICOLON)
            return AstNode(Reassignment(name, expression), Span(identifier.span.start, semicolon.span.end))

        call = self.parse_call(identifier)
        semicolon = self.consume(SEMICOLON)
        return AstNode(CallLine(call), Span(identifier.span.start, semicolon.span.end))

    def parse_call(self, identifier: TokenNode) -> AstNode[FunctionCall]:
        """Parse `( args )` after an already consumed function name."""
        self.consume(LPAREN)
        arguments = self.parse_arguments()
        closing = self.consume(RPAREN)
        call = FunctionCall(identifier.token.value, arguments)
        return AstNode(call, Span(identifier.span.start, closing.span.end))

    def parse_arguments(self) -> List[AstNode[Expression]]:
        arguments: List[AstNode[Expression]] = []
        if self.check(RPAREN):
            return arguments
        arguments.append(self.parse_expression())
        while not self.check(RPAREN):
            # no trailing comma: an argument must follow every comma
            self.consume(COMMA)
            arguments.append(self.parse_expression())
        return arguments

    def parse_expression(self) -> AstNode[Expression]:
        return self.parse_operator_expression(0)

    def parse_operator_expression(self, precedence: int) -> AstNode[Expression]:
        left = self.parse_simple_expression()
        while self.check(OP):
            op = self.tokenizer.peek().token.value
            next_precedence = operator_precedence(op)
            if next_precedence < precedence:
                break
            self.consume(OP)
            right = self.parse_operator_expression(next_precedence)
            left = AstNode(BinaryOperator(left, op, right), Span(left.span.start, right.span.end))
        return left

    def parse_simple_expression(self) -> AstNode[Expression]:
        """Parse an expression without operators."""
        node = self.tokenizer.next()
        token = node.token
        if token.type == INT:
            return AstNode(Number(token.value), node.span)
        if token.type == LPAREN:
            # the parentheses are not part of the inner node's span
            expression = self.parse_expression()
            self.consume(RPAREN)
            return expression
        if token.type == IDENT:
            if self.check(LPAREN):
                # the call expression keeps the identifier's span; the
                # FunctionCall inside it extends to the closing parenthesis
                return AstNode(Call(self.parse_call(node)), node.span)
            return AstNode(Identifier(token.value), node.span)
        raise unexpected(node, INT, LPAREN, IDENT)


def parse_program(source: str) -> AstNode[Program]:
    """Parse Loopy source code into a span-annotated Program."""
    return Parser(SimpleTokenizer(source)).parse()
