import json

import pytest

from loopy.ast import AstNode, Number
from loopy.ast_json import ast_to_obj, ast_from_obj
from loopy.errors import Span
from loopy.parser import parse_program

SOURCE = """
var n = input();
var total = 0;
while 0 < n {
    total = total + n * 2;
    n = n - 1;
}
print(total);
print(f(1, (2)));
print();
"""


def test_round_trip_through_json():
    program = parse_program(SOURCE)
    text = json.dumps(ast_to_obj(program))
    assert ast_from_obj(json.loads(text)) == program


def test_shape():
    obj = ast_to_obj(parse_program("var x = 1 + 2;"))
    assert obj['span'] == [0, 14]
    line = obj['node']['lines'][0]
    assert line['node']['type'] == 'Assignment'
    expression = line['node']['expression']
    assert expression['node'] == {
        'type': 'BinaryOperator',
        'op': '+',
        'left': {'node': {'type': 'Number', 'value': 1}, 'span': [8, 9]},
        'right': {'node': {'type': 'Number', 'value': 2}, 'span': [12, 13]},
    }


def test_single_node():
    assert ast_from_obj(ast_to_obj(AstNode(Number(3), Span(1, 2)))) == AstNode(Number(3), Span(1, 2))


def test_invalid_objects():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'Nope'})
    with pytest.raises(TypeError):
        ast_from_obj([1, 2])
    with pytest.raises(TypeError):
        ast_to_obj(object())
