import dataclasses
from fractions import Fraction as Q

import pytest
from polyfactor.expr import (
    BinaryExpression,
    FunctionCall,
    Identifier,
    NumberLiteral,
    UnaryExpression,
    build,
    canonical_key,
    equivalent,
    integer_value,
    pp,
)

x, y = build.var("x"), build.var("y")


def test_nodes_are_immutable_values():
    a = build.add(x, NumberLiteral(1))
    b = build.add(Identifier("x"), NumberLiteral(1))
    assert a == b
    assert hash(a) == hash(b)
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.op = "-"


def test_invalid_nodes_are_rejected():
    with pytest.raises(TypeError):
        NumberLiteral(True)
    with pytest.raises(TypeError):
        NumberLiteral("3")
    with pytest.raises(ValueError):
        BinaryExpression("%", x, y)
    with pytest.raises(ValueError):
        UnaryExpression("!", x)


def test_function_call_args_are_stored_as_tuple():
    call = FunctionCall("sin", [x])
    assert call.args == (x,)
    assert call.children() == [x]


def test_walk_and_identifiers():
    expr = build.add(build.mul(x, y), FunctionCall("sin", (build.var("z"),)))
    assert expr.identifiers() == {"x", "y", "z"}
    assert expr.contains("z")
    assert not expr.contains("w")
    assert sum(1 for _ in expr.walk()) == 6


@pytest.mark.parametrize(
    "a, b",
    [
        (build.add(x, NumberLiteral(1)), build.add(NumberLiteral(1), x)),
        (build.mul(x, y), build.mul(y, x)),
        (build.sub(x, NumberLiteral(2)), build.add(NumberLiteral(-2), x)),
        (build.add(build.add(x, y), NumberLiteral(1)), build.add(x, build.add(NumberLiteral(1), y))),
        (build.neg(NumberLiteral(3)), NumberLiteral(-3)),
        (build.neg(build.neg(x)), x),
        (build.number(Q(1, 2)), build.div(NumberLiteral(1), NumberLiteral(2))),
    ],
)
def test_equivalent_up_to_commutativity(a, b):
    assert equivalent(a, b)
    assert canonical_key(a) == canonical_key(b)


@pytest.mark.parametrize(
    "a, b",
    [
        (build.sub(x, y), build.sub(y, x)),
        (build.power(x, 2), build.power(NumberLiteral(2), x)),
        (build.div(x, y), build.div(y, x)),
        (build.add(x, x), build.mul(NumberLiteral(2), x)),
    ],
)
def test_not_equivalent(a, b):
    assert not equivalent(a, b)


def test_integer_value():
    assert integer_value(NumberLiteral(4)) == 4
    assert integer_value(NumberLiteral(4.0)) == 4
    assert integer_value(build.neg(NumberLiteral(3))) == -3
    assert integer_value(NumberLiteral(2.5)) is None
    assert integer_value(x) is None


@pytest.mark.parametrize(
    "expr, text",
    [
        (build.polynomial([-6, 11, -6, 1], "x"), "x^3 - 6*x^2 + 11*x - 6"),
        (build.polynomial({2: 1, 0: -4}, "x"), "x^2 - 4"),
        (build.polynomial([Q(1, 4), Q(-1, 2)], "x"), "-1/2*x + 1/4"),
        (build.number(Q(1, 2)), "1/2"),
        (build.neg(build.add(x, NumberLiteral(1))), "-(x + 1)"),
        (build.power(build.add(x, NumberLiteral(1)), 2), "(x + 1)^2"),
        (build.mul(NumberLiteral(3), build.add(build.mul(NumberLiteral(2), x), NumberLiteral(3))), "3*(2*x + 3)"),
        (build.sub(x, build.sub(y, NumberLiteral(1))), "x - (y - 1)"),
        (build.monomial(-2, {"x": 1, "y": 2}), "-2*x*y^2"),
        (build.sqrt(2), "sqrt(2)"),
    ],
)
def test_pretty_print(expr, text):
    assert pp(expr) == text


def test_builders_fold_signs_into_literals():
    assert build.negate(NumberLiteral(3)) == NumberLiteral(-3)
    assert build.negate(build.neg(x)) == x
    assert build.number(Q(6, 3)) == NumberLiteral(2)
    assert build.product([]) == NumberLiteral(1)
    assert build.power(x, 1) == x
