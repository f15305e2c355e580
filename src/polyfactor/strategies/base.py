from __future__ import annotations
from dataclasses import dataclass, field, replace
from fractions import Fraction as Q
from typing import List, Optional, Sequence, Tuple

from polyfactor.config import DEFAULT_CONFIG, FactorConfig
from polyfactor.errors import NotApplicable, NotPolynomial
from polyfactor.expr import Expr, build, equivalent
from polyfactor.poly import PolynomialInfo, dense, univariate_polynomial


@dataclass(frozen=True)
class FactorizationContext:
    """Read-only view of the dispatcher state handed to every strategy."""

    variable: str = "x"
    current_iteration: int = 0
    max_iterations: int = 10

    def advance(self) -> FactorizationContext:
        return replace(self, current_iteration=self.current_iteration + 1)

    @property
    def exhausted(self) -> bool:
        return self.current_iteration >= self.max_iterations


@dataclass
class FactorizationResult:
    success: bool
    changed: bool
    ast: Expr
    steps: List[str] = field(default_factory=list)
    strategy_used: Optional[str] = None
    can_continue: bool = True


class Strategy:
    """
    A factorization heuristic.

    Subclasses set `name`, `description` and `priority` (higher is tried
    first) and override `can_apply` and `apply`. `apply` may assume that
    `can_apply` held and raises `NotApplicable` when a closer look shows the
    pattern does not fit after all.
    """

    name: str = "strategy"
    description: str = ""
    priority: int = 0

    def __init__(self, config: FactorConfig = DEFAULT_CONFIG):
        self.config = config

    def can_apply(self, node: Expr, context: FactorizationContext) -> bool:
        return False

    def apply(self, node: Expr, context: FactorizationContext) -> FactorizationResult:
        raise NotApplicable(self.name)

    def rewrite(self, node: Expr, new: Expr, *steps: str, can_continue: bool = True) -> FactorizationResult:
        changed = not equivalent(node, new)
        return FactorizationResult(
            success=changed,
            changed=changed,
            ast=new if changed else node,
            steps=list(steps),
            strategy_used=self.name,
            can_continue=can_continue,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority})"


def univariate(node: Expr, context: FactorizationContext) -> PolynomialInfo:
    info = univariate_polynomial(node, context.variable)
    if info is None:
        raise NotPolynomial(f"not a polynomial in {context.variable}")
    return info


def integer_form(info: PolynomialInfo) -> Tuple[Q, List[int]]:
    """Split the polynomial into (rational content, primitive integer part with positive leading coefficient)."""
    denominator, integral = dense.clear_denominators(info.dense())
    content, prim = dense.primitive_part(integral)
    return Q(content, denominator), prim


def assemble(content: Q, factors: Sequence[Expr]) -> Expr:
    """content * f_1 * ... * f_k with the sign carried by a leading unary minus."""
    content = Q(content)
    body = build.product(factors)
    if abs(content) != 1:
        body = build.mul(build.number(abs(content)), body) if factors else build.number(abs(content))
    return build.neg(body) if content < 0 else body


def polynomial_factor(coefficients: Sequence, variable: str, multiplicity: int = 1) -> Expr:
    return build.power(build.polynomial(coefficients, variable), multiplicity)
