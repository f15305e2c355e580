"""Expansion into a canonical multivariate polynomial, and algebraic equality.

An expansion is a mapping from monomials to rational coefficients. A monomial
is a sorted tuple of (atom, exponent) pairs where an atom is an identifier, a
square root of a squarefree integer, or an opaque subtree that the expander
does not look into (keyed by its canonical form). Every tree has an expansion,
so `algebraically_equal` is total.
"""

from __future__ import annotations
from fractions import Fraction as Q
from typing import Dict, Optional, Tuple

from polyfactor.config import DEFAULT_CONFIG, FactorConfig
from polyfactor.expr import (
    BinaryExpression,
    Expr,
    Fraction,
    FunctionCall,
    Identifier,
    NumberLiteral,
    UnaryExpression,
    build,
    canonical_key,
    integer_value,
)
from polyfactor.util import as_fraction, squarefree_split

Atom = Tuple
Monomial = Tuple[Tuple[Atom, int], ...]
MultiPoly = Dict[Monomial, Q]

ONE: Monomial = ()


def _mul_monomials(a: Monomial, b: Monomial) -> Tuple[Q, Monomial]:
    exps: Dict[Atom, int] = dict(a)
    for atom, e in b:
        exps[atom] = exps.get(atom, 0) + e
    coefficient = Q(1)
    out = []
    for atom, e in exps.items():
        if atom[0] == "sqrt" and e >= 2:
            # sqrt(m)^2 = m
            coefficient *= Q(atom[1]) ** (e // 2)
            e %= 2
        if e:
            out.append((atom, e))
    return coefficient, tuple(sorted(out))


def _add(a: MultiPoly, b: MultiPoly, scale: Q = Q(1)) -> MultiPoly:
    result = dict(a)
    for mono, c in b.items():
        result[mono] = result.get(mono, Q(0)) + c * scale
    return {m: c for m, c in result.items() if c != 0}


def _mul(a: MultiPoly, b: MultiPoly) -> MultiPoly:
    result: MultiPoly = {}
    for ma, ca in a.items():
        for mb, cb in b.items():
            k, mono = _mul_monomials(ma, mb)
            result[mono] = result.get(mono, Q(0)) + ca * cb * k
    return {m: c for m, c in result.items() if c != 0}


def _pow(a: MultiPoly, n: int) -> MultiPoly:
    result: MultiPoly = {ONE: Q(1)}
    base = a
    while n:
        if n & 1:
            result = _mul(result, base)
        base = _mul(base, base)
        n >>= 1
    return result


def _constant(p: MultiPoly) -> Optional[Q]:
    if not p:
        return Q(0)
    if set(p) == {ONE}:
        return p[ONE]
    return None


class Expander:
    """Expands trees into `MultiPoly` form and remembers a node for each atom."""

    def __init__(self, config: FactorConfig = DEFAULT_CONFIG):
        self.config = config
        self.atoms: Dict[Atom, Expr] = {}

    def _atom(self, atom: Atom, node: Expr) -> MultiPoly:
        self.atoms.setdefault(atom, node)
        return {((atom, 1),): Q(1)}

    def _opaque(self, node: Expr) -> MultiPoly:
        return self._atom(("opaque", canonical_key(node)), node)

    def _sqrt(self, value: Q, node: Expr) -> MultiPoly:
        if value == 0:
            return {}
        # sqrt(p/q) = sqrt(p*q)/q = s/q * sqrt(m)
        s, m = squarefree_split(value.numerator * value.denominator)
        coefficient = Q(s, value.denominator)
        if m == 1:
            return {ONE: coefficient}
        self.atoms.setdefault(("sqrt", m), build.sqrt(m))
        return {((("sqrt", m), 1),): coefficient}

    def expand(self, node: Expr) -> MultiPoly:
        match node:
            case NumberLiteral(value):
                c = as_fraction(value)
                return {ONE: c} if c else {}
            case Identifier(name):
                return self._atom(("var", name), node)
            case UnaryExpression("-", operand):
                return {m: -c for m, c in self.expand(operand).items()}
            case UnaryExpression("+", operand):
                return self.expand(operand)
            case BinaryExpression("+", left, right):
                return _add(self.expand(left), self.expand(right))
            case BinaryExpression("-", left, right):
                return _add(self.expand(left), self.expand(right), Q(-1))
            case BinaryExpression("*", left, right):
                return _mul(self.expand(left), self.expand(right))
            case BinaryExpression("/", num, den) | Fraction(num, den):
                d = _constant(self.expand(den))
                if d:
                    return {m: c / d for m, c in self.expand(num).items()}
            case BinaryExpression("^", base, exponent):
                e = integer_value(exponent)
                if e is not None:
                    b = self.expand(base)
                    if e == 0:
                        return {ONE: Q(1)}
                    c = _constant(b)
                    if c is not None and (e > 0 or c != 0):
                        return {ONE: c ** e} if c else {}
                    # powers of a single monomial never grow, only multinomials are gated
                    if e > 0 and (len(b) == 1 or e <= self.config.max_expansion_power):
                        return _pow(b, e)
            case FunctionCall("sqrt", (arg,)):
                c = _constant(self.expand(arg))
                if c is not None and c >= 0:
                    return self._sqrt(c, node)
        return self._opaque(node)

    def rebuild(self, poly: MultiPoly, variable: Optional[str] = None) -> Expr:
        """Sum of monomials, descending in `variable` (or in total degree)."""

        def order(item):
            mono, _ = item
            var_degree = sum(e for atom, e in mono if atom == ("var", variable))
            total = sum(e for _, e in mono)
            return (-var_degree, -total, mono)

        items = []
        for mono, c in sorted(poly.items(), key=order):
            body = build.product(self._factor_nodes(mono)) if mono else None
            items.append((1 if c > 0 else -1, build.magnitude_term(c, body)))
        return build.signed_sum(items)

    def _factor_nodes(self, mono: Monomial):
        # radicals first, then identifiers, then opaque atoms
        rank = {"sqrt": 0, "var": 1, "opaque": 2}
        for atom, e in sorted(mono, key=lambda item: (rank[item[0][0]], item[0])):
            yield build.power(self.atoms[atom], e)


def expand(node: Expr, config: FactorConfig = DEFAULT_CONFIG) -> MultiPoly:
    return Expander(config).expand(node)


def normalize(node: Expr, variable: Optional[str] = None, config: FactorConfig = DEFAULT_CONFIG) -> Expr:
    """Expand `node` and rebuild it as a sum of monomials."""
    expander = Expander(config)
    return expander.rebuild(expander.expand(node), variable)


def algebraically_equal(a: Expr, b: Expr, config: FactorConfig = DEFAULT_CONFIG) -> bool:
    expander = Expander(config)
    return expander.expand(a) == expander.expand(b)
