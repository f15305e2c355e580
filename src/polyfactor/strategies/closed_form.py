"""Closed-form factorization of quadratics, cubics and quartics.

All three rely on the rational root theorem: a root p/q of a primitive
integer polynomial has p | a_0 and q | a_n, and (q x - p) then divides the
polynomial over Z. Candidate enumeration is skipped when a coefficient
exceeds `divisor_search_limit`; the algebraic strategy covers those inputs.
"""

from __future__ import annotations
from fractions import Fraction as Q
from math import gcd
from typing import List, Optional, Sequence, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr, build
from polyfactor.poly import dense, univariate_polynomial
from polyfactor.util import divisors, integer_root
from .base import (
    FactorizationContext,
    FactorizationResult,
    Strategy,
    assemble,
    integer_form,
    polynomial_factor,
    univariate,
)
from .perfect_power import perfect_power


def candidate_roots(f: Sequence[int], limit: int) -> Optional[List[Q]]:
    """Rational root candidates of an integer polynomial with f(0) != 0, or None past the limit."""
    ps = divisors(f[0], limit)
    qs = divisors(f[-1], limit)
    if ps is None or qs is None:
        return None
    roots = {Q(sign * p, q) for p in ps for q in qs for sign in (1, -1)}
    return sorted(roots, key=lambda r: (abs(r), r < 0))


def peel_rational_roots(f: Sequence[int], limit: int) -> Tuple[List[List[int]], List[int]]:
    """
    Divide out linear factors (q x - p) for every rational root p/q of f.

    Returns the primitive linear factors found (with multiplicity) and the
    integer cofactor, so that f = prod(linear) * cofactor exactly.
    """
    f = list(f)
    linear: List[List[int]] = []
    while dense.degree(f) >= 1 and f[0] == 0:
        linear.append([0, 1])
        f = f[1:]
    if dense.degree(f) < 1:
        return linear, f
    candidates = candidate_roots(f, limit)
    if candidates is None:
        return linear, f
    for root in candidates:
        factor = [-root.numerator, root.denominator]
        while dense.degree(f) >= 1:
            quotient, remainder = dense.synthetic_division(f, root)
            if remainder != 0:
                break
            # f = (x - p/q) * quotient = (q*x - p) * (quotient / q), integral by Gauss's lemma
            quotient = dense.scale(quotient, Q(1, root.denominator))
            assert dense.is_integral(quotient)
            linear.append(factor)
            f = dense.as_integers(quotient)
    return linear, f


class _ClosedForm(Strategy):
    degree = 0

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        info = univariate_polynomial(node, context.variable)
        return info is not None and info.degree == self.degree and len(info.coefficients) >= 2

    def _factor_with_roots(self, node: Expr, context: FactorizationContext, label: str) -> Optional[FactorizationResult]:
        content, f = integer_form(univariate(node, context))
        linear, rest = peel_rational_roots(f, self.config.divisor_search_limit)
        if not linear:
            return None
        x = context.variable
        factors = _collect([build.polynomial(l, x) for l in linear])
        if dense.degree(rest) >= 1:
            factors.append(build.polynomial(rest, x))
        else:
            content *= rest[0]
        found = len(linear)
        return self.rewrite(
            node, assemble(content, factors), f"Factored {label} using {found} rational root{'s' if found > 1 else ''}"
        )


def _collect(nodes: List[Expr]) -> List[Expr]:
    """Collapse runs of identical factors into powers."""
    out: List[Expr] = []
    i = 0
    while i < len(nodes):
        j = i
        while j < len(nodes) and nodes[j] == nodes[i]:
            j += 1
        out.append(build.power(nodes[i], j - i))
        i = j
    return out


class Quadratic(_ClosedForm):
    name = "Quadratic"
    description = "Factors ax^2 + bx + c by perfect squares, rational roots or the AC method"
    priority = 80
    degree = 2

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        info = univariate(node, context)
        x = context.variable
        square = perfect_power(info.dense(), 2)
        if square is not None:
            content, g, k = square
            return self.rewrite(node, assemble(content, [polynomial_factor(g, x, k)]), "Recognized a perfect square trinomial")

        result = self._factor_with_roots(node, context, "quadratic")
        if result is not None:
            return result

        content, (c, b, a) = integer_form(info)
        split = self.ac_method(a, b, c)
        if split is None:
            raise NotApplicable(self.name)
        first, second = split
        return self.rewrite(
            node,
            assemble(content, [build.polynomial(first, x), build.polynomial(second, x)]),
            "Factored quadratic by the AC method",
        )

    def ac_method(self, a: int, b: int, c: int) -> Optional[Tuple[List[int], List[int]]]:
        """Find m + n = b, m * n = a * c and regroup ax^2 + mx + nx + c into two linear factors."""
        ac = a * c
        if ac == 0 or abs(ac) > self.config.ac_search_limit:
            return None
        for d in divisors(ac):
            for m in (d, -d):
                n = ac // m
                if m + n != b:
                    continue
                g = gcd(a, m)
                # ax^2 + mx + nx + c = (a/g x + m/g)(g x + n g / a)
                first = [m // g, a // g]
                second = [n // (a // g), g]
                return first, second
        return None


class Cubic(_ClosedForm):
    name = "Cubic"
    description = "Factors cubics by sums and differences of cubes, perfect cubes and rational roots"
    priority = 60
    degree = 3

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        info = univariate(node, context)
        x = context.variable
        content, f = integer_form(info)

        if f[1] == 0 and f[2] == 0:
            alpha, beta = integer_root(f[3], 3), integer_root(f[0], 3)
            if alpha is not None and beta is not None:
                # (alpha x)^3 + beta^3 = (alpha x + beta)(alpha^2 x^2 - alpha beta x + beta^2)
                linear = [beta, alpha]
                quadratic = [beta * beta, -alpha * beta, alpha * alpha]
                kind = "sum" if beta > 0 else "difference"
                return self.rewrite(
                    node,
                    assemble(content, [build.polynomial(linear, x), build.polynomial(quadratic, x)]),
                    f"Applied the {kind} of cubes",
                )

        cube = perfect_power(f, 3)
        if cube is not None and cube[2] == 3:
            c, g, k = cube
            return self.rewrite(node, assemble(content * c, [polynomial_factor(g, x, k)]), "Recognized a perfect cube")

        result = self._factor_with_roots(node, context, "cubic")
        if result is None:
            raise NotApplicable(self.name)
        return result


class Quartic(_ClosedForm):
    name = "Quartic"
    description = "Factors quartics by rational roots and biquadratic square splits"
    priority = 85
    degree = 4

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        result = self._factor_with_roots(node, context, "quartic")
        if result is not None:
            return result

        content, f = integer_form(univariate(node, context))
        split = self.biquadratic_split(f)
        if split is None:
            raise NotApplicable(self.name)
        x = context.variable
        return self.rewrite(
            node,
            assemble(content, [build.polynomial(s, x) for s in split]),
            "Split biquadratic as a difference of squares",
        )

    @staticmethod
    def biquadratic_split(f: Sequence[int]) -> Optional[Tuple[List[int], List[int]]]:
        """
        ax^4 + bx^2 + c = (alpha x^2 + gamma)^2 - (delta x)^2 when a = alpha^2, c = gamma^2
        and 2 alpha gamma - b = delta^2 for some sign of gamma.
        """
        c, linear, b, cubic, a = f
        if linear != 0 or cubic != 0:
            return None
        alpha, gamma = integer_root(a, 2), integer_root(c, 2)
        if alpha is None or gamma is None:
            return None
        for g in (gamma, -gamma):
            delta = integer_root(2 * alpha * g - b, 2)
            if delta:
                return [g, -delta, alpha], [g, delta, alpha]
        return None
