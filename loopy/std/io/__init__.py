from typing import Dict, Optional

from loopy.ast import AstNode, FunctionCall, Identifier
from loopy.builtin_function import BuiltinFunction
from loopy.errors import EvaluationError
from loopy.state import State
from loopy.types import parse_i32
from .basic_io import BasicIO


class Input(BuiltinFunction):
    """`input()`: read one integer from the console."""
    name = 'input'

    def __init__(self, basic_io: BasicIO):
        self.io = basic_io

    def invoke(self, evaluator, state: State, call: AstNode[FunctionCall]) -> int:
        if call.node.arguments:
            raise EvaluationError('Input function does not take any arguments', call.span)

        self.io.write_line('Input: ')
        try:
            line = self.io.read_line()
        except (OSError, ValueError) as e:
            raise EvaluationError(f'Error when reading from console: {e!r}', call.span)

        text = line.strip()
        value = parse_i32(text)
        if value is None:
            raise EvaluationError(f'Error when converting string to integer: {text!r}', call.span)
        return value


class Print(BuiltinFunction):
    """`print()` dumps every variable, `print(expr)` writes one value."""
    name = 'print'

    def __init__(self, basic_io: BasicIO):
        self.io = basic_io

    def invoke(self, evaluator, state: State, call: AstNode[FunctionCall]) -> int:
        arguments = call.node.arguments
        if len(arguments) == 0:
            self.io.write_line(state.format_variables())
            return 0
        if len(arguments) == 1:
            expression = arguments[0]
            value = evaluator.evaluate_expression(state, expression)
            if isinstance(expression.node, Identifier):
                self.io.write_line(f'{expression.node.name} = {value}')
            else:
                self.io.write_line(f'Result = {value}')
            return 0
        raise EvaluationError(f'Too many arguments for print. Expected 0 or 1, got {len(arguments)}', call.span)


def populate_functions(basic_io: Optional[BasicIO] = None) -> Dict[str, BuiltinFunction]:
    basic_io = basic_io if basic_io is not None else BasicIO()
    return {
        'input': Input(basic_io),
        'print': Print(basic_io),
    }
