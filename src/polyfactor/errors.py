"""Exception taxonomy of the factorization engine.

Only the dispatcher converts these into trace entries; everywhere else they
propagate like ordinary exceptions.
"""

from __future__ import annotations
from typing import Optional, Sequence


class FactorizationError(Exception):
    pass


class NotApplicable(FactorizationError):
    """A strategy's precondition failed. Skipped silently."""


class NoProgress(FactorizationError):
    """A strategy ran but could not change the tree."""


class VerificationFailure(FactorizationError):
    """A candidate factorization failed the exact re-multiplication check."""


class Irreducible(FactorizationError):
    """The algebraic subsystem exhausted its search without splitting the input."""

    def __init__(self, coefficients: Optional[Sequence[int]] = None):
        self.coefficients = list(coefficients) if coefficients is not None else None
        super().__init__("irreducible over the integers")


class NotPolynomial(NotApplicable, ValueError):
    """The tree has no polynomial view for the requested variable. Skipped like NotApplicable."""
