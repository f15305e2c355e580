from __future__ import annotations
from fractions import Fraction as Q
from typing import Dict, List, Optional, Sequence, Tuple

from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr, build, pp
from polyfactor.poly import TermInfo, analyze_term, extract_terms
from polyfactor.util import fraction_gcd
from .base import FactorizationContext, FactorizationResult, Strategy

MonomialTerm = Tuple[Q, Dict[str, int]]


def signed_terms(node: Expr) -> Optional[List[TermInfo]]:
    """The additive terms of `node` as monomials, or None if any term has an opaque factor."""
    infos = []
    for term in extract_terms(node):
        info = analyze_term(term.node).scaled(Q(term.sign))
        if not info.is_monomial:
            return None
        infos.append(info)
    return infos


def extract_common_factor(
    terms: Sequence[TermInfo], normalize_sign: bool = False
) -> Tuple[Q, Dict[str, int], List[MonomialTerm]]:
    """
    Split terms into (coefficient, shared powers, quotient terms).

    The coefficient is the positive rational gcd of the term coefficients and
    the shared powers hold the least exponent of every symbol present in all
    terms. With `normalize_sign` the coefficient takes the sign of the first
    term, so the quotient always starts with a positive term.
    """
    coefficient = fraction_gcd([t.coefficient for t in terms])
    if coefficient == 0:
        coefficient = Q(1)
    if normalize_sign and terms and terms[0].coefficient < 0:
        coefficient = -coefficient

    shared: Dict[str, int] = dict(terms[0].powers) if terms else {}
    for t in terms[1:]:
        powers = dict(t.powers)
        shared = {n: min(e, powers[n]) for n, e in shared.items() if n in powers}
    shared = {n: e for n, e in shared.items() if e > 0}

    quotients = []
    for t in terms:
        powers = dict(t.powers)
        rest = {n: e - shared.get(n, 0) for n, e in powers.items() if e - shared.get(n, 0)}
        quotients.append((t.coefficient / coefficient, dict(sorted(rest.items()))))
    return coefficient, shared, quotients


class CommonFactor(Strategy):
    name = "Common Factor"
    description = "Pulls the numeric gcd and the shared symbol powers out of a sum"
    priority = 140

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        terms = signed_terms(node)
        if terms is None or len(terms) < 2:
            return False
        coefficient, shared, _ = extract_common_factor(terms)
        return coefficient != 1 or bool(shared)

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        terms = signed_terms(node)
        if terms is None or len(terms) < 2:
            raise NotApplicable(self.name)
        coefficient, shared, quotients = extract_common_factor(terms)
        if coefficient == 1 and not shared:
            raise NotApplicable(self.name)

        factor = build.monomial(coefficient, sorted(shared.items()))
        remainder = build.terms_sum(quotients)
        result = build.mul(factor, remainder)
        return self.rewrite(node, result, f"Extracted common factor {pp(factor)}")
