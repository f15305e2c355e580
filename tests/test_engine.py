import logging
from fractions import Fraction as Q

import pytest
import sympy

import polyfactor
from polyfactor import DEFAULT_CONFIG, FactorConfig, FactorizationEngine, factor
from polyfactor.engine import combine_factors, split_factors
from polyfactor.poly import dense
from polyfactor.expr import (
    BinaryExpression,
    Fraction,
    FunctionCall,
    Identifier,
    NumberLiteral,
    UnaryExpression,
    build,
    pp,
)
from polyfactor.strategies import (
    AlgebraicFactorization,
    DifferenceOfSquares,
    FactorizationContext,
    Strategy,
)

x = build.var("x")


def poly(*coefficients, variable="x"):
    """Polynomial from descending coefficients."""
    return build.polynomial(list(reversed(coefficients)), variable)


def to_sympy(node):
    match node:
        case NumberLiteral(value):
            q = Q(value)
            return sympy.Rational(q.numerator, q.denominator)
        case Identifier(name):
            return sympy.Symbol(name)
        case UnaryExpression("-", operand):
            return -to_sympy(operand)
        case UnaryExpression("+", operand):
            return to_sympy(operand)
        case BinaryExpression("+", left, right):
            return to_sympy(left) + to_sympy(right)
        case BinaryExpression("-", left, right):
            return to_sympy(left) - to_sympy(right)
        case BinaryExpression("*", left, right):
            return to_sympy(left) * to_sympy(right)
        case BinaryExpression("/", left, right) | Fraction(left, right):
            return to_sympy(left) / to_sympy(right)
        case BinaryExpression("^", left, right):
            return to_sympy(left) ** to_sympy(right)
        case FunctionCall(name, args):
            return getattr(sympy, name)(*(to_sympy(a) for a in args))
    raise TypeError(node)


@pytest.mark.parametrize(
    "node, text",
    [
        (poly(6, 9), "3*(2*x + 3)"),
        (poly(1, 0, -4), "(x - 2)*(x + 2)"),
        (poly(1, -6, 11, -6), "(x - 1)*(x - 2)*(x - 3)"),
        (poly(1, 0, 0, 0, -1), "(x - 1)*(x + 1)*(x^2 + 1)"),
    ],
)
def test_examples(node, text):
    result = factor(node)
    assert result.success and result.changed
    assert pp(result.ast) == text
    assert result.steps
    assert not result.can_continue


def test_irreducible_input_is_unchanged():
    node = poly(1, 1, 1)
    result = factor(node)
    assert not result.success and not result.changed
    assert result.ast is node
    assert "Integer Factorization: x^2 + x + 1 is irreducible over the integers" in result.steps


@pytest.mark.parametrize(
    "node, text",
    [
        (poly(2, 0, -8, 0), "2*x*(x - 2)*(x + 2)"),
        (poly(1, 0, -5, 0, 4), "(x - 1)*(x + 1)*(x - 2)*(x + 2)"),
        (poly(1, 0, 0, 0, 4), "(x^2 - 2*x + 2)*(x^2 + 2*x + 2)"),
        (poly(1, 0, 0, 0, 1, 1), "(x^2 + x + 1)*(x^3 - x^2 + 1)"),
        (poly(1, 2, 1), "(x + 1)^2"),
        (poly(6, -1, -1), "(3*x + 1)*(2*x - 1)"),
        (poly(1, 1, 1, 1), "(x^2 + 1)*(x + 1)"),
        (poly(1, 0, -1, variable="t"), "(t - 1)*(t + 1)"),
    ],
)
def test_end_to_end(node, text):
    variable = "t" if "t" in node.identifiers() else "x"
    assert pp(factor(node, variable).ast) == text


def test_products_powers_and_signs_are_factored_inside():
    product = build.mul(poly(1, 0, -4), poly(1, 0, -9))
    assert pp(factor(product).ast) == "(x - 2)*(x + 2)*(x - 3)*(x + 3)"
    assert pp(factor(build.neg(poly(1, 0, -4))).ast) == "-(x - 2)*(x + 2)"
    assert pp(factor(build.power(poly(1, 0, -1), 2)).ast) == "(x - 1)^2*(x + 1)^2"
    square = build.power(build.add(x, NumberLiteral(1)), 2)
    assert not factor(square).changed


def test_unexpanded_input_is_normalized_first():
    # (x + 1)(x + 2) - 2 written out as a sum
    node = build.sub(build.mul(build.add(x, NumberLiteral(1)), build.add(x, NumberLiteral(2))), NumberLiteral(2))
    assert pp(factor(node).ast) == "x*(x + 3)"


def test_other_symbols_are_coefficients():
    a = build.var("a")
    node = build.sub(build.mul(a, build.power(x, 2)), a)
    assert pp(factor(node).ast) == "a*(x - 1)*(x + 1)"


def test_division_by_a_constant_becomes_a_coefficient():
    half = build.div(poly(1, 0, -1), NumberLiteral(2))
    result = factor(half)
    assert result.changed
    assert pp(result.ast) == "1/2*(x - 1)*(x + 1)"
    assert pp(factor(Fraction(poly(1, 0, -1), NumberLiteral(2))).ast) == "1/2*(x - 1)*(x + 1)"
    irreducible = build.div(poly(1, 1, 1), NumberLiteral(2))
    assert factor(irreducible).ast is irreducible


def test_normalization_alone_is_not_a_factorization():
    node = build.add(build.add(build.mul(x, x), x), NumberLiteral(1))
    result = factor(node)
    assert not result.success and not result.changed
    assert result.ast is node
    assert result.strategy_used is None


def test_non_polynomials_pass_through():
    node = build.add(FunctionCall("sin", (x,)), NumberLiteral(1))
    result = factor(node)
    assert not result.changed
    assert result.ast is node


EXAMPLES = [
    poly(6, 9),
    poly(1, 0, -4),
    poly(1, -6, 11, -6),
    poly(1, 0, 0, 0, -1),
    poly(1, 1, 1),
    poly(2, 0, -8, 0),
    poly(1, 0, 0, 0, 0, 0, -1),
    poly(1, 0, 0, 0, 0, 0, 0, 0, -1),
    poly(1, 0, 0, 0, -1, 0),
    poly(1, 0, 0, 0, 1, 1),
    poly(1, 0, -14, 0, 49, 0, -36),
    poly(1, 0, -10, 0, 1),
    poly(6, -1, -1),
    poly(4, -12, 9),
    poly(3, 0, -3, 0),
    poly(8, 0, 0, 27),
]


@pytest.mark.parametrize("node", EXAMPLES, ids=pp)
def test_soundness(node):
    result = factor(node)
    assert sympy.expand(to_sympy(result.ast) - to_sympy(node)) == 0


@pytest.mark.parametrize("node", EXAMPLES, ids=pp)
def test_complete_over_the_integers(node):
    result = factor(node)
    _, factors = split_factors(result.ast)
    _, expected = sympy.factor_list(to_sympy(node))
    assert sum(e for _, e in factors) == sum(m for _, m in expected)


@pytest.mark.parametrize("node", EXAMPLES, ids=pp)
def test_idempotence(node):
    once = factor(node).ast
    again = factor(once)
    assert not again.changed
    assert pp(again.ast) == pp(once)


HIGH_DEGREE = [
    poly(1, *[0] * 32, -1),
    poly(1, *[0] * 35, -1),
    # (x^17 + x + 1)(x^17 + 2x + 3)
    build.polynomial(dense.mul([1, 1] + [0] * 15 + [1], [3, 2] + [0] * 15 + [1]), "x"),
]


@pytest.mark.parametrize("node", HIGH_DEGREE, ids=["x^33 - 1", "x^36 - 1", "degree 34 product"])
def test_high_degree_results_pass_verification(node):
    result = factor(node)
    assert result.changed
    assert not any("candidate discarded" in step for step in result.steps)
    assert sympy.expand(to_sympy(result.ast) - to_sympy(node)) == 0
    _, factors = split_factors(result.ast)
    _, expected = sympy.factor_list(to_sympy(node))
    assert sum(e for _, e in factors) == sum(m for _, m in expected)


class Recorder(Strategy):
    def __init__(self, name, priority, log):
        super().__init__()
        self.name = name
        self.priority = priority
        self.log = log

    def can_apply(self, node, context):
        self.log.append(self.name)
        return False


def test_strategies_run_in_priority_order():
    log = []
    engine = FactorizationEngine(
        [Recorder("low", 1, log), Recorder("high", 5, log), Recorder("tie-a", 3, log), Recorder("tie-b", 3, log)]
    )
    assert [s.name for s in engine.strategies] == ["high", "tie-a", "tie-b", "low"]
    engine.factor(poly(1, 1))
    assert log == ["high", "tie-a", "tie-b", "low"]
    engine.register(Recorder("top", 9, log))
    assert engine.strategies[0].name == "top"


def test_first_applicable_strategy_wins():
    for strategies in ([DifferenceOfSquares(), AlgebraicFactorization()], [AlgebraicFactorization(), DifferenceOfSquares()]):
        result = FactorizationEngine(strategies).factor(poly(1, 0, -1))
        assert result.strategy_used == "Difference of Squares"
        assert pp(result.ast) == "(x - 1)*(x + 1)"


class Broken(Strategy):
    name = "Broken"
    priority = 200

    def can_apply(self, node, context):
        return True

    def apply(self, node, context):
        raise RuntimeError("boom")


def test_strategy_errors_are_isolated(caplog):
    engine = FactorizationEngine()
    engine.register(Broken())
    with caplog.at_level(logging.WARNING, logger="polyfactor.engine"):
        result = engine.factor(poly(1, 0, -4))
    assert pp(result.ast) == "(x - 2)*(x + 2)"
    assert "Broken: internal error: RuntimeError: boom" in result.steps
    assert any("Broken" in record.getMessage() for record in caplog.records)


class Unsound(Strategy):
    name = "Unsound"
    priority = 200

    def can_apply(self, node, context):
        return True

    def apply(self, node, context):
        return self.rewrite(node, build.mul(NumberLiteral(2), node), "doubled")


def test_unsound_results_are_discarded():
    engine = FactorizationEngine()
    engine.register(Unsound())
    result = engine.factor(poly(1, 0, -4))
    assert pp(result.ast) == "(x - 2)*(x + 2)"
    assert any(step.startswith("Unsound: candidate discarded") for step in result.steps)
    assert "Unsound: doubled" not in result.steps


class Wrap(Strategy):
    name = "Wrap"
    priority = 1

    def can_apply(self, node, context):
        return True

    def apply(self, node, context):
        return self.rewrite(node, build.mul(NumberLiteral(1), node), "wrapped")


def test_iteration_limit():
    engine = FactorizationEngine([Wrap()], FactorConfig(max_iterations=3))
    result = engine.factor(poly(1, 1))
    assert result.changed
    assert result.can_continue
    assert result.steps.count("Wrap: wrapped") == 3
    assert result.steps[-1].startswith("Maximum iterations reached")


class Toggle(Strategy):
    name = "Toggle"
    priority = 1

    def can_apply(self, node, context):
        return True

    def apply(self, node, context):
        match node:
            case BinaryExpression("*", NumberLiteral(1), inner):
                return self.rewrite(node, inner, "unwrapped")
        return self.rewrite(node, build.mul(NumberLiteral(1), node), "wrapped")


def test_cycles_are_detected():
    result = FactorizationEngine([Toggle()]).factor(poly(1, 1))
    assert result.steps[-1] == "Stopped: x + 1 repeats an earlier form"
    assert not result.can_continue


def test_split_and_combine_factors():
    node = build.mul(NumberLiteral(3), build.power(build.mul(x, poly(1, 1)), 2))
    coefficient, factors = split_factors(node)
    assert coefficient == 3
    assert factors == [(x, 2), (poly(1, 1), 2)]
    assert pp(combine_factors(Q(-1, 2), [(x, 1), (x, 2), (NumberLiteral(4), 1)])) == "-2*x^3"


def test_context_and_config():
    context = FactorizationContext("x", 0, 2)
    assert context.advance().current_iteration == 1
    assert context.advance().advance().exhausted
    assert context.current_iteration == 0
    changed = DEFAULT_CONFIG.with_changes(max_iterations=3)
    assert changed.max_iterations == 3
    assert DEFAULT_CONFIG.max_iterations == 10


def test_package_level_factor():
    result = polyfactor.factor(poly(1, 0, -9))
    assert pp(result.ast) == "(x - 3)*(x + 3)"
    assert result.strategy_used == "Difference of Squares"
