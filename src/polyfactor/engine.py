"""Strategy registry and the recursive dispatcher."""

from __future__ import annotations
import logging
from fractions import Fraction as Q
from typing import Dict, Iterable, List, Optional, Tuple

from polyfactor.config import DEFAULT_CONFIG, FactorConfig
from polyfactor.errors import Irreducible, NoProgress, NotApplicable, VerificationFailure
from polyfactor.expr import (
    BinaryExpression,
    Expr,
    Fraction,
    NumberLiteral,
    UnaryExpression,
    build,
    canonical_key,
    integer_value,
    pp,
)
from polyfactor.poly import algebraically_equal, normalize
from polyfactor.strategies import FactorizationContext, FactorizationResult, Strategy, default_strategies
from polyfactor.strategies.base import assemble
from polyfactor.util import as_fraction

__all__ = ["FactorizationEngine", "factor", "split_factors", "combine_factors"]

logger = logging.getLogger(__name__)

Factors = List[Tuple[Expr, int]]


def _numeric_value(node: Expr) -> Optional[Q]:
    match node:
        case NumberLiteral(value):
            return as_fraction(value)
        case Fraction(NumberLiteral(n), NumberLiteral(d)) if as_fraction(d) != 0:
            return as_fraction(n) / as_fraction(d)
    return None


def split_factors(node: Expr) -> Tuple[Q, Factors]:
    """Read `node` as coefficient * prod(base ** exponent)."""
    value = _numeric_value(node)
    if value is not None:
        return value, []
    match node:
        case BinaryExpression("*", left, right):
            cl, fl = split_factors(left)
            cr, fr = split_factors(right)
            return cl * cr, fl + fr
        case UnaryExpression("-", operand):
            c, fs = split_factors(operand)
            return -c, fs
        case UnaryExpression("+", operand):
            return split_factors(operand)
        case BinaryExpression("^", base, exponent):
            e = integer_value(exponent)
            if e is not None and e >= 1:
                c, fs = split_factors(base)
                return c ** e, [(b, m * e) for b, m in fs]
        case BinaryExpression("/", numerator, denominator) | Fraction(numerator, denominator):
            d = _numeric_value(denominator)
            if d:
                c, fs = split_factors(numerator)
                return c / d, fs
    return Q(1), [(node, 1)]


def combine_factors(coefficient: Q, factors: Iterable[Tuple[Expr, int]]) -> Expr:
    """Merge numeric factors into the coefficient and repeated bases into powers."""
    order: List[Tuple] = []
    bases: Dict[Tuple, Expr] = {}
    exponents: Dict[Tuple, int] = {}
    for node, exponent in factors:
        c, inner = split_factors(node)
        coefficient *= c ** exponent
        for base, e in inner:
            key = canonical_key(base)
            if key not in bases:
                order.append(key)
                bases[key] = base
                exponents[key] = 0
            exponents[key] += e * exponent
    return assemble(coefficient, [build.power(bases[k], exponents[k]) for k in order])


def _is_sum(node: Expr) -> bool:
    return isinstance(node, BinaryExpression) and node.op in ("+", "-")


def _is_product(coefficient: Q, factors: Factors) -> bool:
    return coefficient != 1 or len(factors) != 1 or factors[0][1] != 1


class FactorizationEngine:
    """
    Holds strategies ordered by descending priority and factors trees to a fixpoint.

    Strategies with equal priority keep their registration order. The engine
    never raises from `factor`: every strategy failure is caught, recorded in
    the step trace and the scan moves on.
    """

    def __init__(self, strategies: Optional[Iterable[Strategy]] = None, config: Optional[FactorConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._strategies: List[Strategy] = []
        for strategy in default_strategies(self.config) if strategies is None else strategies:
            self.register(strategy)

    @property
    def strategies(self) -> Tuple[Strategy, ...]:
        return tuple(self._strategies)

    def register(self, strategy: Strategy) -> None:
        self._strategies.append(strategy)
        # sort is stable, so ties stay in registration order
        self._strategies.sort(key=lambda s: -s.priority)

    def factor(self, node: Expr, variable: str = "x") -> FactorizationResult:
        context = FactorizationContext(variable, 0, self.config.max_iterations)
        steps: List[str] = []
        result, used, exhausted = self._factor(node, context, steps, 0)
        changed = canonical_key(result) != canonical_key(node)
        logger.debug("factor(%s) -> %s (%d steps)", pp(node), pp(result), len(steps))
        return FactorizationResult(
            success=changed,
            changed=changed,
            ast=result if changed else node,
            steps=steps,
            strategy_used=used,
            can_continue=exhausted,
        )

    def _factor(self, node: Expr, context: FactorizationContext, steps: List[str], depth: int):
        coefficient, factors = split_factors(node)
        if _is_product(coefficient, factors):
            return self._factor_product(node, coefficient, factors, context, steps, depth, rewrite_only=False)
        return self._run(node, context, steps, depth)

    def _factor_product(self, node, coefficient, factors, context, steps, depth, rewrite_only=True):
        used, exhausted = None, False
        progressed = False
        results = []
        for base, exponent in factors:
            if depth >= self.config.max_depth:
                results.append((base, exponent))
                continue
            sub_context = FactorizationContext(context.variable, 0, context.max_iterations)
            factored, sub_used, sub_exhausted = self._factor(base, sub_context, steps, depth + 1)
            used = used or sub_used
            exhausted = exhausted or sub_exhausted
            progressed = progressed or factored is not base
            results.append((factored, exponent))
        # an input product whose factors all stay put is returned as written
        if not (progressed or rewrite_only):
            return node, used, exhausted
        combined = combine_factors(coefficient, results)
        if canonical_key(combined) == canonical_key(node):
            return node, used, exhausted
        return combined, used, exhausted

    def _run(self, node: Expr, context: FactorizationContext, steps: List[str], depth: int):
        current = node
        if self.config.normalize_input and _is_sum(current):
            current = normalize(current, context.variable, self.config)
        start = canonical_key(current)

        seen = {start}
        excluded = set()
        used = None
        exhausted = False
        while True:
            if context.exhausted:
                steps.append(f"Maximum iterations reached for {pp(current)}")
                exhausted = True
                break
            applied = self._apply_first(current, context, steps, excluded)
            if applied is None:
                break
            strategy, result = applied
            used = used or strategy.name
            if not result.can_continue:
                excluded.add(id(strategy))

            coefficient, factors = split_factors(result.ast)
            if _is_product(coefficient, factors):
                new, _, sub_exhausted = self._factor_product(result.ast, coefficient, factors, context, steps, depth)
                exhausted = exhausted or sub_exhausted
            else:
                new = result.ast
            key = canonical_key(new)
            if key in seen:
                steps.append(f"Stopped: {pp(new)} repeats an earlier form")
                break
            seen.add(key)
            current = new
            context = context.advance()

        # normalization alone is not a factorization
        if canonical_key(current) in (start, canonical_key(node)):
            return node, used, exhausted
        return current, used, exhausted

    def _apply_first(self, node: Expr, context: FactorizationContext, steps: List[str], excluded) -> Optional[Tuple[Strategy, FactorizationResult]]:
        """Try strategies in priority order and return the first accepted result."""
        for strategy in self._strategies:
            if id(strategy) in excluded:
                continue
            try:
                if not strategy.can_apply(node, context):
                    continue
                result = strategy.apply(node, context)
            except NotApplicable:
                continue
            except Irreducible as exc:
                steps.append(f"{strategy.name}: {pp(node)} is {exc}")
                continue
            except NoProgress:
                steps.append(f"{strategy.name}: no progress on {pp(node)}")
                continue
            except VerificationFailure as exc:
                steps.append(f"{strategy.name}: candidate discarded: {exc}")
                continue
            except Exception as exc:
                logger.warning("strategy %s failed on %s", strategy.name, pp(node), exc_info=True)
                steps.append(f"{strategy.name}: internal error: {type(exc).__name__}: {exc}")
                continue

            if not result.changed:
                steps.append(f"{strategy.name}: no progress on {pp(node)}")
                continue
            if self.config.verify_results and not algebraically_equal(result.ast, node, self.config):
                logger.debug("discarding unsound result of %s: %s", strategy.name, pp(result.ast))
                steps.append(f"{strategy.name}: candidate discarded: {pp(result.ast)} does not expand to {pp(node)}")
                continue
            logger.debug("%s: %s -> %s", strategy.name, pp(node), pp(result.ast))
            steps.extend(f"{strategy.name}: {step}" for step in result.steps)
            return strategy, result
        return None


def factor(node: Expr, variable: str = "x", config: Optional[FactorConfig] = None) -> FactorizationResult:
    """Factor `node` in `variable` with the default strategies."""
    return FactorizationEngine(config=config).factor(node, variable)
