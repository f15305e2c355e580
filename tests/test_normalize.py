from fractions import Fraction as Q

import pytest
from polyfactor.config import FactorConfig
from polyfactor.expr import FunctionCall, NumberLiteral, build, pp
from polyfactor.poly import algebraically_equal, expand, normalize

x, y = build.var("x"), build.var("y")
one = NumberLiteral(1)


def test_normalize_expands_products():
    expr = build.mul(build.add(x, one), build.sub(x, one))
    assert pp(normalize(expr, "x")) == "x^2 - 1"


def test_normalize_orders_by_the_variable():
    # (y + x)^2
    expr = build.power(build.add(y, x), 2)
    assert pp(normalize(expr, "x")) == "x^2 + 2*x*y + y^2"


@pytest.mark.parametrize(
    "a, b",
    [
        (build.power(build.add(x, one), 2), build.add(build.add(build.power(x, 2), build.mul(NumberLiteral(2), x)), one)),
        (build.mul(NumberLiteral(3), build.add(build.mul(NumberLiteral(2), x), NumberLiteral(3))), build.polynomial([9, 6], "x")),
        (build.div(build.mul(NumberLiteral(2), x), NumberLiteral(4)), build.mul(build.number(Q(1, 2)), x)),
        (build.neg(build.sub(x, y)), build.sub(y, x)),
        (build.power(x, 0), one),
    ],
)
def test_algebraically_equal(a, b):
    assert algebraically_equal(a, b)


def test_not_equal():
    assert not algebraically_equal(build.power(build.add(x, one), 2), build.add(build.power(x, 2), one))


def test_square_roots_are_folded():
    assert expand(build.power(build.sqrt(2), 2)) == {(): Q(2)}
    assert algebraically_equal(build.sqrt(8), build.mul(NumberLiteral(2), build.sqrt(2)))
    assert algebraically_equal(build.sqrt(Q(1, 2)), build.div(build.sqrt(2), NumberLiteral(2)))
    assert algebraically_equal(build.sqrt(9), NumberLiteral(3))
    # (x - sqrt(2)) (x + sqrt(2)) = x^2 - 2
    s = build.sqrt(2)
    assert algebraically_equal(build.mul(build.sub(x, s), build.add(x, s)), build.sub(build.power(x, 2), NumberLiteral(2)))


def test_function_calls_are_opaque_atoms():
    sin_x = FunctionCall("sin", (x,))
    assert algebraically_equal(build.mul(sin_x, sin_x), build.power(sin_x, 2))
    assert not algebraically_equal(sin_x, FunctionCall("cos", (x,)))
    assert expand(build.sub(sin_x, FunctionCall("sin", (x,)))) == {}


def test_large_powers_stay_unexpanded():
    config = FactorConfig(max_expansion_power=2)
    cube = build.power(build.add(x, one), 3)
    expanded = build.polynomial([1, 3, 3, 1], "x")
    assert algebraically_equal(cube, expanded)
    assert not algebraically_equal(cube, expanded, config)
    assert algebraically_equal(cube, cube, config)


def test_cancellation_gives_the_zero_polynomial():
    assert expand(build.sub(build.mul(x, y), build.mul(y, x))) == {}
    assert expand(x) != {}


def test_monomial_powers_expand_past_the_gate():
    config = FactorConfig(max_expansion_power=2)
    assert algebraically_equal(build.power(build.mul(NumberLiteral(2), x), 5), build.monomial(32, {"x": 5}), config)
    # x^36 - 1 = (x^18 - 1)(x^18 + 1)
    lhs = build.sub(build.power(x, 36), one)
    rhs = build.mul(build.sub(build.power(x, 18), one), build.add(build.power(x, 18), one))
    assert algebraically_equal(lhs, rhs)
