from __future__ import annotations
from fractions import Fraction as Q
from typing import List, Optional, Sequence, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr, build
from polyfactor.poly import dense
from .base import FactorizationContext, FactorizationResult, Strategy, assemble, polynomial_factor, univariate

_POWER_NAMES = {2: "square", 3: "cube"}


def polynomial_root(f: Sequence, k: int) -> Optional[List[Q]]:
    """
    The monic h with h^k = f / lc(f), or None if there is none over Q.

    The root is computed as a power series in 1/x: with F(y) = y^n f(1/y) / lc(f),
    G = F^(1/k) satisfies g_j = 1/j * sum_{i=1..j} ((1/k + 1) i - j) F_i g_{j-i}.
    Only the first deg(f)/k + 1 terms are needed; the candidate is then
    checked by exact re-multiplication.
    """
    f = dense.monic(f)
    n = len(f) - 1
    if n < k or n % k:
        return None
    d = n // k
    series = f[::-1]
    alpha = Q(1, k)
    g = [Q(1)]
    for j in range(1, d + 1):
        total = sum(((alpha + 1) * i - j) * series[i] * g[j - i] for i in range(1, j + 1))
        g.append(total / j)
    h = g[::-1]
    if dense.pow_(h, k) != dense.trim(f):
        return None
    return h


def perfect_power(f: Sequence, max_degree: int) -> Optional[Tuple[Q, List[int], int]]:
    """Write f as c * g^k with g primitive integral and k >= 2 as large as possible."""
    n = dense.degree(f)
    if n < 2 or n > max_degree:
        return None
    for k in range(n, 1, -1):
        if n % k:
            continue
        h = polynomial_root(f, k)
        if h is None:
            continue
        g = dense.primitive(h)
        content = Q(dense.leading(f)) / g[-1] ** k
        return content, g, k
    return None


class PerfectPower(Strategy):
    name = "Perfect Power"
    description = "Recognizes c * g(x)^k, including perfect square trinomials"
    priority = 90

    def _match(self, node: Expr, context: FactorizationContext) -> Tuple[Q, List[int], int]:
        info = univariate(node, context)
        if len(info.coefficients) < 2:
            raise NotApplicable(self.name)
        if info.degree == 2:
            c, b, a = (info.coefficients.get(i, Q(0)) for i in range(3))
            if b * b - 4 * a * c != 0:
                raise NotApplicable(self.name)
        match = perfect_power(info.dense(), self.config.max_perfect_power_degree)
        if match is None:
            raise NotApplicable(self.name)
        return match

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        try:
            self._match(node, context)
        except NotApplicable:
            return False
        return True

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        content, g, k = self._match(node, context)
        result = assemble(content, [polynomial_factor(g, context.variable, k)])
        kind = _POWER_NAMES.get(k, f"{k}th power")
        return self.rewrite(node, result, f"Recognized a perfect {kind}")
