import pytest

from loopy.errors import EvaluationError, format_error
from loopy.interpreter import Evaluator
from loopy.parser import parse_program


def test_program_4_keyword_prefixed_identifier(example_source):
    source = example_source('program_4.loopy')
    ast = parse_program(source)
    with pytest.raises(EvaluationError) as exc:
        Evaluator().evaluate(ast)
    # `var_next` is an identifier, so this is a reassignment of an undeclared name
    assert format_error(exc.value, source) == (
        'Variable var_next is not defined, on line 5 char 5:\n    var_next = 0;'
    )
