from .config import DEFAULT_CONFIG, FactorConfig
from .engine import FactorizationEngine, factor
from .errors import (
    FactorizationError,
    Irreducible,
    NoProgress,
    NotApplicable,
    NotPolynomial,
    VerificationFailure,
)
from .strategies import FactorizationContext, FactorizationResult, Strategy, default_strategies

__all__ = [
    "DEFAULT_CONFIG",
    "FactorConfig",
    "FactorizationEngine",
    "factor",
    "FactorizationError",
    "Irreducible",
    "NoProgress",
    "NotApplicable",
    "NotPolynomial",
    "VerificationFailure",
    "FactorizationContext",
    "FactorizationResult",
    "Strategy",
    "default_strategies",
]
