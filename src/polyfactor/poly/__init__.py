from . import dense
from .view import (
    PolynomialInfo,
    Term,
    TermInfo,
    analyze_polynomial,
    analyze_term,
    extract_terms,
    univariate_polynomial,
)
from .normalize import Expander, algebraically_equal, expand, normalize

__all__ = [
    "dense",
    "PolynomialInfo",
    "Term",
    "TermInfo",
    "analyze_polynomial",
    "analyze_term",
    "extract_terms",
    "univariate_polynomial",
    "Expander",
    "algebraically_equal",
    "expand",
    "normalize",
]
