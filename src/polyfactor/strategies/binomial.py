from __future__ import annotations
from functools import lru_cache
from typing import List, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr, build
from polyfactor.poly import dense
from polyfactor.util import divisors, is_power_of_two
from .base import FactorizationContext, FactorizationResult, Strategy, univariate


@lru_cache(maxsize=None)
def cyclotomic(n: int) -> Tuple[int, ...]:
    """Coefficients (ascending) of the n-th cyclotomic polynomial."""
    f = [-1] + [0] * (n - 1) + [1]
    for d in divisors(n)[:-1]:
        f = dense.exact_quotient(f, list(cyclotomic(d)))
        assert f is not None
    return tuple(dense.as_integers(f))


def binomial_factors(n: int, sign: int) -> List[Tuple[int, ...]]:
    """Cyclotomic factors of x^n - 1 (sign < 0) or x^n + 1 (sign > 0), by increasing index."""
    if sign < 0:
        return [cyclotomic(d) for d in divisors(n)]
    return [cyclotomic(d) for d in divisors(2 * n) if n % d != 0]


class BinomialPower(Strategy):
    name = "Binomial Power"
    description = "Factors x^n - 1 and x^n + 1 into cyclotomic polynomials"
    priority = 130

    def _binomial(self, node: Expr, context: FactorizationContext) -> Tuple[int, int]:
        info = univariate(node, context)
        n = info.degree
        if set(info.coefficients) != {0, n} or info.coefficients[n] != 1 or abs(info.constant_term) != 1:
            raise NotApplicable(self.name)
        if n < 2 or n > self.config.max_binomial_degree:
            raise NotApplicable(self.name)
        return n, int(info.constant_term)

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        try:
            n, sign = self._binomial(node, context)
        except NotApplicable:
            return False
        return len(binomial_factors(n, sign)) > 1 or self._surd_split_allowed(n)

    def _surd_split_allowed(self, n: int) -> bool:
        return self.config.allow_irrational_factors and n >= 4 and is_power_of_two(n)

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        n, sign = self._binomial(node, context)
        x = context.variable
        factors = binomial_factors(n, sign)
        if len(factors) > 1:
            nodes = [build.polynomial(f, x) for f in factors]
            kind = "x^n - 1" if sign < 0 else "x^n + 1"
            return self.rewrite(
                node, build.product(nodes), f"Applied the cyclotomic factorization of {kind} with n = {n}"
            )

        if not self._surd_split_allowed(n):
            raise NotApplicable(self.name)
        # x^n + 1 = (x^(n/2) + 1)^2 - (sqrt(2) x^(n/4))^2
        half = build.power(build.var(x), n // 2)
        middle = build.mul(build.sqrt(2), build.power(build.var(x), n // 4))
        one = build.number(1)
        result = build.mul(
            build.add(build.add(half, middle), one),
            build.add(build.sub(half, middle), one),
        )
        return self.rewrite(node, result, f"Split x^{n} + 1 into two quadratic-surd factors", can_continue=False)
