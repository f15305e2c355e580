"""Polynomial view of an expression tree.

The view reads a tree as a sum of terms, each a rational coefficient times
integer powers of identifiers. Factors outside that shape (function calls,
unexpanded sub-sums, symbolic exponents, division by non-numbers) are kept as
opaque factors of value 1. A tree whose opaque factors mention the designated
variable has no polynomial view.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from fractions import Fraction as Q
from typing import Dict, List, Optional, Tuple

from polyfactor.expr import (
    BinaryExpression,
    Expr,
    Fraction,
    Identifier,
    NumberLiteral,
    UnaryExpression,
    integer_value,
)
from polyfactor.util import as_fraction
from . import dense


@dataclass(frozen=True)
class Term:
    sign: int
    node: Expr


@dataclass(frozen=True)
class TermInfo:
    coefficient: Q
    powers: Tuple[Tuple[str, int], ...] = ()
    rest: Tuple[Expr, ...] = ()

    @property
    def is_monomial(self) -> bool:
        return not self.rest

    def scaled(self, factor: Q) -> TermInfo:
        return TermInfo(self.coefficient * factor, self.powers, self.rest)


@dataclass(frozen=True)
class PolynomialInfo:
    variable: str
    degree: int
    coefficients: Dict[int, Q]
    is_univariate: bool
    variables: frozenset = field(default_factory=frozenset)

    @property
    def constant_term(self) -> Q:
        return self.coefficients.get(0, Q(0))

    @property
    def exponents(self) -> List[int]:
        return sorted(self.coefficients)

    def dense(self) -> List[Q]:
        """Ascending coefficient list, index = exponent."""
        return dense.from_mapping(self.coefficients)


def extract_terms(node: Expr, sign: int = 1) -> List[Term]:
    """Flatten nested `+`/`-` chains and unary signs into signed terms."""
    match node:
        case BinaryExpression("+", left, right):
            return extract_terms(left, sign) + extract_terms(right, sign)
        case BinaryExpression("-", left, right):
            return extract_terms(left, sign) + extract_terms(right, -sign)
        case UnaryExpression("-", operand):
            return extract_terms(operand, -sign)
        case UnaryExpression("+", operand):
            return extract_terms(operand, sign)
    return [Term(sign, node)]


def _merge_powers(a, b, scale: int = 1) -> Tuple[Tuple[str, int], ...]:
    merged: Dict[str, int] = dict(a)
    for name, exp in b:
        merged[name] = merged.get(name, 0) + exp * scale
    return tuple(sorted((n, e) for n, e in merged.items() if e != 0))


def _literal_value(node: Expr) -> Optional[Q]:
    match node:
        case NumberLiteral(value):
            return as_fraction(value)
        case UnaryExpression("-", operand):
            inner = _literal_value(operand)
            return None if inner is None else -inner
        case Fraction(num, den) | BinaryExpression("/", num, den):
            n, d = _literal_value(num), _literal_value(den)
            if n is None or d is None or d == 0:
                return None
            return n / d
    return None


def analyze_term(node: Expr) -> TermInfo:
    """Split a single additive term into coefficient, identifier powers and opaque rest."""
    match node:
        case NumberLiteral(value):
            return TermInfo(as_fraction(value))
        case Identifier(name):
            return TermInfo(Q(1), ((name, 1),))
        case UnaryExpression("-", operand):
            return analyze_term(operand).scaled(Q(-1))
        case UnaryExpression("+", operand):
            return analyze_term(operand)
        case BinaryExpression("*", left, right):
            a, b = analyze_term(left), analyze_term(right)
            return TermInfo(a.coefficient * b.coefficient, _merge_powers(a.powers, b.powers), a.rest + b.rest)
        case Fraction(num, den) | BinaryExpression("/", num, den):
            d = _literal_value(den)
            if d is not None and d != 0:
                return analyze_term(num).scaled(1 / d)
        case BinaryExpression("^", base, exponent):
            e = integer_value(exponent)
            if e is not None:
                inner = analyze_term(base)
                if inner.is_monomial and (e >= 0 or not inner.powers) and (e >= 0 or inner.coefficient != 0):
                    return TermInfo(inner.coefficient ** e, _merge_powers((), inner.powers, e))
    return TermInfo(Q(1), (), (node,))


def analyze_polynomial(node: Expr, variable: str) -> Optional[PolynomialInfo]:
    """The coefficient mapping of `node` in `variable`, or None when it has no polynomial view."""
    coefficients: Dict[int, Q] = {}
    univariate = True
    names = set()
    for term in extract_terms(node):
        info = analyze_term(term.node)
        for opaque in info.rest:
            if opaque.contains(variable):
                return None
            names |= opaque.identifiers()
            univariate = False
        exp = 0
        for name, e in info.powers:
            names.add(name)
            if name == variable:
                exp = e
            else:
                univariate = False
        coefficients[exp] = coefficients.get(exp, Q(0)) + term.sign * info.coefficient
    coefficients = {e: c for e, c in coefficients.items() if c != 0}
    if not coefficients:
        return None
    return PolynomialInfo(
        variable=variable,
        degree=max(coefficients),
        coefficients=coefficients,
        is_univariate=univariate,
        variables=frozenset(names),
    )


def univariate_polynomial(node: Expr, variable: str) -> Optional[PolynomialInfo]:
    """Like `analyze_polynomial` but only for trees in `variable` alone."""
    info = analyze_polynomial(node, variable)
    if info is None or not info.is_univariate:
        return None
    return info
