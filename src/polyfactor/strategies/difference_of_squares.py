from __future__ import annotations
from fractions import Fraction as Q
from typing import List, Optional, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import BinaryExpression, Expr, build, integer_value
from polyfactor.poly import TermInfo, analyze_term, extract_terms
from polyfactor.util import rational_root
from .base import FactorizationContext, FactorizationResult, Strategy


def square_root_term(info: TermInfo) -> Optional[Expr]:
    """The unsigned square root of |term|, or None if the term is not a perfect square."""
    root = rational_root(abs(info.coefficient), 2)
    if root is None or any(e % 2 for _, e in info.powers):
        return None
    parts: List[Expr] = []
    body = build.variable_part([(n, e // 2) for n, e in info.powers])
    if body is not None:
        parts.append(body)
    for opaque in info.rest:
        match opaque:
            case BinaryExpression("^", base, exponent) if (e := integer_value(exponent)) is not None and e > 0 and e % 2 == 0:
                parts.append(build.power(base, e // 2))
            case _:
                return None
    return build.magnitude_term(root, build.product(parts) if parts else None)


class DifferenceOfSquares(Strategy):
    name = "Difference of Squares"
    description = "Rewrites a^2 - b^2 as (a - b)(a + b)"
    priority = 120

    def _split(self, node: Expr) -> Tuple[Expr, Expr]:
        terms = extract_terms(node)
        if len(terms) != 2:
            raise NotApplicable(self.name)
        infos = [analyze_term(t.node).scaled(Q(t.sign)) for t in terms]
        if infos[0].coefficient * infos[1].coefficient >= 0:
            raise NotApplicable(self.name)
        if all(not i.powers and not i.rest for i in infos):
            raise NotApplicable(self.name)
        positive, negative = infos if infos[0].coefficient > 0 else infos[::-1]
        a, b = square_root_term(positive), square_root_term(negative)
        if a is None or b is None:
            raise NotApplicable(self.name)
        return a, b

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        try:
            self._split(node)
        except NotApplicable:
            return False
        return True

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        a, b = self._split(node)
        result = build.mul(build.sub(a, b), build.add(a, b))
        return self.rewrite(node, result, "Applied the difference of squares a^2 - b^2 = (a - b)(a + b)")
