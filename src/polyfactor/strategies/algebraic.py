from __future__ import annotations

from polyfactor.algebraic import IntegerPolynomialFactorizer
from polyfactor.errors import NotApplicable
from polyfactor.expr import Expr
from .base import FactorizationContext, FactorizationResult, Strategy, assemble, polynomial_factor, univariate


class AlgebraicFactorization(Strategy):
    """Complete factorization over Z by modular factorization, Hensel lifting and recombination.

    Raises `Irreducible` for polynomials that do not split, which the
    dispatcher reports without changing the tree.
    """

    name = "Integer Factorization"
    description = "Factors over the integers via Berlekamp, Hensel lifting and lattice recombination"
    priority = 10

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        try:
            info = univariate(node, context)
        except NotApplicable:
            return False
        return 2 <= info.degree <= self.config.max_algebraic_degree and len(info.coefficients) >= 2

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        info = univariate(node, context)
        factorization = IntegerPolynomialFactorizer(self.config).factor(info.dense())
        factors = [polynomial_factor(g, context.variable, m) for g, m in factorization.factors]
        return self.rewrite(
            node,
            assemble(factorization.content, factors),
            f"Factored over the integers into {factorization.factor_count} irreducible factors",
            can_continue=False,
        )
