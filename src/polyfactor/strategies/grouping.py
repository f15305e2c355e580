from __future__ import annotations
from typing import List, Sequence, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr, build
from polyfactor.poly import TermInfo
from .base import FactorizationContext, FactorizationResult, Strategy
from .common_factor import extract_common_factor, signed_terms

Pattern = Sequence[Sequence[int]]


def grouping_patterns(n: int) -> List[Pattern]:
    """Index groupings tried for n terms: pairings for 4, halves/alternating/pairs for 6, halves otherwise."""
    if n == 4:
        return [[[0, 1], [2, 3]], [[0, 2], [1, 3]], [[0, 3], [1, 2]]]
    if n == 6:
        return [[[0, 1, 2], [3, 4, 5]], [[0, 2, 4], [1, 3, 5]], [[0, 1], [2, 3], [4, 5]]]
    half = n // 2
    return [[list(range(half)), list(range(half, n))]]


def _shape(quotients) -> Tuple:
    return tuple(sorted((tuple(sorted(powers.items())), coefficient) for coefficient, powers in quotients))


class Grouping(Strategy):
    name = "Grouping"
    description = "Factors by grouping terms that share a common remainder"
    priority = 70

    def _terms(self, node: Expr) -> List[TermInfo]:
        terms = signed_terms(node)
        if terms is None or len(terms) < 4:
            raise NotApplicable(self.name)
        return terms

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        try:
            self._terms(node)
        except NotApplicable:
            return False
        return True

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        terms = self._terms(node)
        for pattern in grouping_patterns(len(terms)):
            groups = [extract_common_factor([terms[i] for i in group], normalize_sign=True) for group in pattern]
            remainders = {_shape(q) for _, _, q in groups}
            if len(remainders) != 1:
                continue
            _, _, remainder = groups[0]
            if len(remainder) < 2:
                continue
            outer = build.terms_sum([(coefficient, shared) for coefficient, shared, _ in groups])
            result = build.mul(outer, build.terms_sum(remainder))
            return self.rewrite(node, result, f"Grouped terms as {_describe(pattern)}")
        raise NotApplicable(self.name)


def _describe(pattern: Pattern) -> str:
    return " + ".join("(" + ", ".join(str(i + 1) for i in group) + ")" for group in pattern)
