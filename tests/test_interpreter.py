import io

import pytest

from loopy.ast import AstNode, Number, BinaryOperator, Program, Assignment, CallLine
from loopy.errors import EvaluationError, Span
from loopy.interpreter import Evaluator, run_program, compile_module
from loopy.lexer import Operator
from loopy.parser import parse_program
from loopy.state import State
from loopy.std.io import BasicIO


def ast(node):
    return AstNode(node, Span(0, 0))


def run(source: str, stdin: str = ''):
    out = io.StringIO()
    run_program(source, io=BasicIO(io.StringIO(stdin), out))
    return out.getvalue().splitlines()


def run_lines(source: str) -> State:
    evaluator = Evaluator(io=BasicIO(io.StringIO(), io.StringIO()))
    state = evaluator.new_state()
    for line in parse_program(source).node.lines:
        evaluator.evaluate_line(state, line)
    return state


def test_evaluate_expression():
    expression = ast(BinaryOperator(ast(Number(1)), Operator.PLUS, ast(Number(2))))
    assert Evaluator().evaluate_expression(State(), expression) == 3


def test_end_to_end():
    assert run("var a = 2; var b = 3; print(a * b + 1);") == ['Result = 7']


def test_equal_precedence_evaluates_right_grouped():
    # 1 - (2 - 3)
    assert run("print(1 - 2 - 3);") == ['Result = 2']


def test_less_than():
    assert run("print(1 < 2); print(2 < 1); print(2 < 2);") == ['Result = 1', 'Result = 0', 'Result = 0']


def test_loop_runs_until_condition_is_zero():
    state = run_lines("var i = 0; var n = 0; while i < 3 { i = i + 1; n = n + 1; }")
    assert state.variables == {'i': 3, 'n': 3}


def test_loop_body_not_executed_when_false():
    state = run_lines("var x = 5; while 0 { undefined = 1; }")
    assert state.variables == {'x': 5}


def test_arithmetic_wraps_to_32_bits():
    assert run("var x = 2147483647 + 1; print(x);") == ['x = -2147483648']
    assert run("print(65536 * 65536);") == ['Result = 0']
    assert run("print(2147483647 * 2);") == ["Result = -2"]


def test_redefinition_fails():
    with pytest.raises(EvaluationError) as exc:
        run("var x = 1; var x = 2;")
    assert exc.value.message == 'Variable x is already defined'
    assert exc.value.span == Span(11, 21)


def test_reassignment_of_undefined_variable_fails():
    with pytest.raises(EvaluationError) as exc:
        run("y = 1;")
    assert exc.value.message == 'Variable y is not defined'
    assert exc.value.span == Span(0, 6)


def test_use_of_undefined_variable_fails():
    with pytest.raises(EvaluationError) as exc:
        run("print(y);")
    assert exc.value.message == 'Variable does not exist: y'
    assert exc.value.span == Span(6, 7)


def test_unknown_function_in_statement():
    with pytest.raises(EvaluationError) as exc:
        run("foo(1);")
    assert exc.value.message == 'Function foo not found'
    assert exc.value.span == Span(0, 6)


def test_unknown_function_in_expression():
    with pytest.raises(EvaluationError) as exc:
        run("var x = foo();")
    assert exc.value.message == 'Function foo not found'
    assert exc.value.span == Span(8, 13)


def test_left_operand_is_evaluated_first():
    assert run("print(input() - input());", stdin="10\n3\n") == ['Input: ', 'Input: ', 'Result = 7']


def test_first_error_aborts_the_run():
    out = io.StringIO()
    with pytest.raises(EvaluationError):
        run_program("print(1); y = 2; print(3);", io=BasicIO(io.StringIO(), out))
    assert out.getvalue() == 'Result = 1\n'


def test_state_is_fresh_for_every_evaluation():
    evaluator = Evaluator(io=BasicIO(io.StringIO(), io.StringIO()))
    program = parse_program("var x = 1;")
    evaluator.evaluate(program)
    evaluator.evaluate(program)


def test_function_table():
    assert set(Evaluator().new_state().functions) == {'input', 'print'}


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    evaluator = Evaluator(debug_level=3, debug_file=str(debug_file), io=BasicIO(io.StringIO(), io.StringIO()))
    evaluator.evaluate(parse_program("var i = 0; while i < 1 { i = i + 1; } print(i);"))
    trace = debug_file.read_text(encoding='utf-8').splitlines()
    assert trace[0] == 'start: 3 lines'
    assert 'var i = 0' in trace
    assert 'i = 1' in trace
    assert 'while condition -> 1' in trace
    assert 'while condition -> 0' in trace
    assert 'call print with 1 arguments' in trace
    assert trace[-1] == 'finish: {i: 1}'
    assert evaluator.debug_fp is None


def test_no_debug_file_by_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run("var x = 1;")
    assert not (tmp_path / 'debug.txt').exists()


def _deep_sum(depth: int):
    expression = AstNode(Number(1), Span(0, 1))
    for _ in range(depth):
        expression = AstNode(BinaryOperator(AstNode(Number(1), Span(0, 1)), Operator.PLUS, expression), Span(0, 1))
    return expression


def test_deeply_nested_expression_is_a_located_error():
    with pytest.raises(EvaluationError) as exc:
        Evaluator().evaluate_expression(State(), _deep_sum(5000))
    assert exc.value.message == 'Expression nested too deeply'
    assert exc.value.span == Span(0, 1)


def test_deeply_nested_program_is_a_located_error():
    program = AstNode(Program([AstNode(Assignment('x', _deep_sum(5000)), Span(0, 1))]), Span(0, 1))
    with pytest.raises(EvaluationError) as exc:
        Evaluator(io=BasicIO(io.StringIO(), io.StringIO())).evaluate(program)
    assert exc.value.message == 'Expression nested too deeply'


def test_long_sum_evaluates():
    assert run("print(" + " + ".join(["1"] * 200) + ");") == ['Result = 200']


def test_compile_module(tmp_path):
    path = tmp_path / 'program.loopy'
    path.write_text("var a = 4;\nprint(a * a);\n", encoding='utf-8')
    out = io.StringIO()
    program = compile_module(str(path), io=BasicIO(io.StringIO(), out))
    assert out.getvalue() == 'Result = 16\n'
    assert [type(line.node) for line in program.node.lines] == [Assignment, CallLine]
