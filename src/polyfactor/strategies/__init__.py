from typing import List

from polyfactor.config import DEFAULT_CONFIG, FactorConfig
from .base import FactorizationContext, FactorizationResult, Strategy
from .algebraic import AlgebraicFactorization
from .binomial import BinomialPower, cyclotomic
from .closed_form import Cubic, Quadratic, Quartic, peel_rational_roots
from .common_factor import CommonFactor, extract_common_factor
from .difference_of_squares import DifferenceOfSquares
from .grouping import Grouping
from .perfect_power import PerfectPower, polynomial_root
from .substitution import ExponentSubstitution

STRATEGY_CLASSES = [
    CommonFactor,
    BinomialPower,
    DifferenceOfSquares,
    PerfectPower,
    ExponentSubstitution,
    Quartic,
    Quadratic,
    Grouping,
    Cubic,
    AlgebraicFactorization,
]


def default_strategies(config: FactorConfig = DEFAULT_CONFIG) -> List[Strategy]:
    return [cls(config) for cls in STRATEGY_CLASSES]


__all__ = [
    "FactorizationContext",
    "FactorizationResult",
    "Strategy",
    "AlgebraicFactorization",
    "BinomialPower",
    "CommonFactor",
    "Cubic",
    "DifferenceOfSquares",
    "ExponentSubstitution",
    "Grouping",
    "PerfectPower",
    "Quadratic",
    "Quartic",
    "cyclotomic",
    "extract_common_factor",
    "peel_rational_roots",
    "polynomial_root",
    "default_strategies",
    "STRATEGY_CLASSES",
]
