from __future__ import annotations
from fractions import Fraction as Q
from math import gcd
from typing import List, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr, Fraction, build
from polyfactor.poly import dense
from polyfactor.util import rational_root
from .base import FactorizationContext, FactorizationResult, Strategy, assemble, integer_form, univariate
from .closed_form import peel_rational_roots


class ExponentSubstitution(Strategy):
    """Treats a polynomial whose exponents share a factor k as a quadratic or cubic in t = x^k."""

    name = "Exponent Substitution"
    description = "Substitutes t = x^k when every exponent is a multiple of k"
    priority = 86

    def _reduced(self, node: Expr, context: FactorizationContext) -> Tuple[int, Q, List[int]]:
        info = univariate(node, context)
        exponents = [e for e in info.coefficients if e > 0]
        k = 0
        for e in exponents:
            k = gcd(k, e)
        if k < 2 or len(info.coefficients) < 2 or info.degree // k not in (2, 3):
            raise NotApplicable(self.name)
        content, f = integer_form(info)
        return k, content, f[::k]

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        try:
            self._reduced(node, context)
        except NotApplicable:
            return False
        return True

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        k, content, t_poly = self._reduced(node, context)
        x = context.variable
        linear, rest = peel_rational_roots(t_poly, self.config.divisor_search_limit)
        if linear:
            factors = [build.polynomial(dense.compose_power(l, k), x) for l in linear]
            if dense.degree(rest) >= 1:
                factors.append(build.polynomial(dense.compose_power(rest, k), x))
            else:
                content *= rest[0]
            return self.rewrite(
                node, assemble(content, factors), f"Substituted t = {x}^{k} and factored over the rational roots in t"
            )

        if dense.degree(t_poly) != 2 or not self.config.allow_irrational_factors:
            raise NotApplicable(self.name)
        c, b, a = t_poly
        discriminant = b * b - 4 * a * c
        if discriminant <= 0 or rational_root(Q(discriminant), 2) is not None:
            raise NotApplicable(self.name)
        # a t^2 + b t + c = a (t - r1)(t - r2), r = (-b -+ sqrt(D)) / 2a
        xk = build.power(build.var(x), k)
        factors = []
        for combine in (build.sub, build.add):
            root = Fraction(combine(build.number(-b), build.sqrt(discriminant)), build.number(2 * a))
            factors.append(build.sub(xk, root))
        return self.rewrite(
            node,
            assemble(content * a, factors),
            f"Substituted t = {x}^{k} and applied the quadratic formula",
            can_continue=False,
        )
