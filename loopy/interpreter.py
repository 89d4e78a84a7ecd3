"""Tree-walking evaluator for the Loopy language.

The evaluator executes a parsed `Program` line by line against a fresh
`State`. All values are signed 32-bit integers. Function calls are
resolved by name through the state's function table, which is seeded
with the builtins from `loopy.std.io` and never changes afterwards.

The first error raised anywhere aborts the whole run; every error is a
`SpanError` carrying the location of the node that caused it.
"""

from __future__ import annotations

from typing import Optional, TextIO

from .ast import (
    AstNode, Expression, Line, FunctionCall, Program,
    Number, Identifier, BinaryOperator, Call,
    Assignment, Reassignment, CallLine, Loop,
)
from .errors import EvaluationError
from .lexer import Operator
from .parser import parse_program
from .state import State
from .std.io import BasicIO, populate_functions
from .types import wrap_i32


class Evaluator:
    """Executes Loopy ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', io: Optional[BasicIO] = None):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None
        self.io = io if io is not None else BasicIO()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def new_state(self) -> State:
        return State(functions=populate_functions(self.io))

    # Public API
    def evaluate(self, program: AstNode[Program]) -> None:
        state = self.new_state()
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        try:
            self.debug(f"start: {len(program.node.lines)} lines")
            for line in program.node.lines:
                try:
                    self.evaluate_line(state, line)
                except RecursionError:
                    raise EvaluationError("Nested too deeply", line.span) from None
            self.debug(f"finish: {state.format_variables()}")
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def evaluate_line(self, state: State, line: AstNode[Line]) -> None:
        node = line.node
        if isinstance(node, Assignment):
            value = self.evaluate_expression(state, node.expression)
            if node.name in state.variables:
                raise EvaluationError(f"Variable {node.name} is already defined", line.span)
            state.variables[node.name] = value
            if self.debug_level >= 2:
                self.debug(f"var {node.name} = {value}")
            return
        if isinstance(node, Reassignment):
            value = self.evaluate_expression(state, node.expression)
            if node.name not in state.variables:
                raise EvaluationError(f"Variable {node.name} is not defined", line.span)
            state.variables[node.name] = value
            if self.debug_level >= 2:
                self.debug(f"{node.name} = {value}")
            return
        if isinstance(node, CallLine):
            self.evaluate_function_call(state, node.call)
            return
        if isinstance(node, Loop):
            while True:
                condition = self.evaluate_expression(state, node.condition)
                if self.debug_level >= 3:
                    self.debug(f"while condition -> {condition}")
                if condition == 0:
                    break
                for body_line in node.body:
                    self.evaluate_line(state, body_line)
            return
        raise NotImplementedError(f"evaluate_line: unexpected node type {type(node)}")

    def evaluate_function_call(self, state: State, call: AstNode[FunctionCall]) -> int:
        function = state.functions.get(call.node.name)
        if function is None:
            raise EvaluationError(f"Function {call.node.name} not found", call.span)
        if self.debug_level >= 2:
            self.debug(f"call {call.node.name} with {len(call.node.arguments)} arguments")
        return function.invoke(self, state, call)

    def evaluate_operator(self, op: Operator, left: int, right: int) -> int:
        if op is Operator.PLUS:
            return wrap_i32(left + right)
        if op is Operator.MINUS:
            return wrap_i32(left - right)
        if op is Operator.MULTIPLICATION:
            return wrap_i32(left * right)
        if op is Operator.LESS_THAN:
            return 1 if left < right else 0
        raise NotImplementedError(f"unsupported operator {op}")

    def evaluate_expression(self, state: State, expression: AstNode[Expression]) -> int:
        node = expression.node
        if isinstance(node, Number):
            return node.value
        if isinstance(node, Call):
            return self.evaluate_function_call(state, node.call)
        if isinstance(node, BinaryOperator):
            try:
                left = self.evaluate_expression(state, node.left)
                right = self.evaluate_expression(state, node.right)
            except RecursionError:
                raise EvaluationError("Expression nested too deeply", expression.span) from None
            return self.evaluate_operator(node.op, left, right)
        if isinstance(node, Identifier):
            if node.name not in state.variables:
                raise EvaluationError(f"Variable does not exist: {node.name}", expression.span)
            return state.variables[node.name]
        raise NotImplementedError(f"evaluate_expression: unexpected node type {type(node)}")


def run_program(source: str, debug_level: int = 0, io: Optional[BasicIO] = None) -> None:
    """Convenience function to parse and evaluate a Loopy program from source string."""
    program = parse_program(source)
    Evaluator(debug_level=debug_level, io=io).evaluate(program)


def compile_module(file_path: str, debug_level: int = 0, io: Optional[BasicIO] = None) -> AstNode[Program]:
    """Parse and evaluate a Loopy file, returning its AST."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    Evaluator(debug_level=debug_level, io=io).evaluate(program)
    return program
