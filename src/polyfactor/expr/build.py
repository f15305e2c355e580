"""Constructors for expression trees.

All builders emit integer literals where possible and represent a
non-integral rational p/q as `Fraction(NumberLiteral(p), NumberLiteral(q))`.
"""

from __future__ import annotations
import fractions
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from polyfactor.util import as_fraction
from .base import (
    BinaryExpression,
    Expr,
    Fraction,
    FunctionCall,
    Identifier,
    NumberLiteral,
    UnaryExpression,
)

Q = fractions.Fraction
Powers = Union[Mapping[str, int], Sequence[Tuple[str, int]]]


def number(value) -> Expr:
    q = as_fraction(value)
    if q.denominator == 1:
        return NumberLiteral(q.numerator)
    return Fraction(NumberLiteral(q.numerator), NumberLiteral(q.denominator))


def var(name: str) -> Identifier:
    return Identifier(name)


def add(left: Expr, right: Expr) -> Expr:
    return BinaryExpression("+", left, right)


def sub(left: Expr, right: Expr) -> Expr:
    return BinaryExpression("-", left, right)


def mul(left: Expr, right: Expr) -> Expr:
    return BinaryExpression("*", left, right)


def div(left: Expr, right: Expr) -> Expr:
    return BinaryExpression("/", left, right)


def neg(operand: Expr) -> Expr:
    return UnaryExpression("-", operand)


def power(base: Expr, exponent: Union[int, Expr]) -> Expr:
    if isinstance(exponent, int):
        if exponent == 1:
            return base
        exponent = NumberLiteral(exponent)
    return BinaryExpression("^", base, exponent)


def sqrt(value) -> Expr:
    return FunctionCall("sqrt", (number(value),))


def product(factors: Iterable[Expr]) -> Expr:
    """Left-associated multiplication chain; the empty product is 1."""
    result: Optional[Expr] = None
    for factor in factors:
        result = factor if result is None else mul(result, factor)
    return NumberLiteral(1) if result is None else result


def variable_part(powers: Powers) -> Optional[Expr]:
    items = powers.items() if isinstance(powers, Mapping) else powers
    parts = [power(var(name), exp) for name, exp in items if exp != 0]
    return product(parts) if parts else None


def magnitude_term(coefficient: Q, body: Optional[Expr]) -> Expr:
    """The unsigned term |coefficient| * body."""
    c = abs(as_fraction(coefficient))
    if body is None:
        return number(c)
    if c == 1:
        return body
    return mul(number(c), body)


def monomial(coefficient, powers: Powers) -> Expr:
    c = as_fraction(coefficient)
    body = variable_part(powers)
    if body is None:
        return number(c)
    term = magnitude_term(c, body)
    return neg(term) if c < 0 else term


def signed_sum(items: Sequence[Tuple[int, Expr]]) -> Expr:
    """Join unsigned terms with `+`/`-`; a leading negative term becomes a unary minus."""
    if not items:
        return NumberLiteral(0)
    sign, first = items[0]
    result = first if sign > 0 else negate(first)
    for sign, term in items[1:]:
        result = add(result, term) if sign > 0 else sub(result, term)
    return result


def negate(term: Expr) -> Expr:
    """-term, folding the sign into numeric literals."""
    match term:
        case NumberLiteral(value):
            return NumberLiteral(-value)
        case Fraction(NumberLiteral(value), den):
            return Fraction(NumberLiteral(-value), den)
        case UnaryExpression("-", operand):
            return operand
    return neg(term)


def terms_sum(terms: Sequence[Tuple[Q, Powers]]) -> Expr:
    """Sum of monomials given as (coefficient, powers) pairs, in the given order."""
    items = []
    for coefficient, powers in terms:
        c = as_fraction(coefficient)
        if c == 0:
            continue
        items.append((1 if c > 0 else -1, magnitude_term(c, variable_part(powers))))
    return signed_sum(items)


def polynomial(coefficients: Union[Mapping[int, Q], Sequence], variable: str) -> Expr:
    """Univariate polynomial in descending powers.

    `coefficients` is either an exponent -> coefficient mapping or an
    ascending coefficient list (index = exponent).
    """
    if isinstance(coefficients, Mapping):
        mapping = dict(coefficients)
    else:
        mapping = {i: c for i, c in enumerate(coefficients)}
    terms = [(mapping[e], {variable: e}) for e in sorted(mapping, reverse=True) if mapping[e] != 0]
    return terms_sum(terms)
