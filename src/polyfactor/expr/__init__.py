from .base import *
from .equiv import canonical_key, equivalent
from .pretty import pp, pps
from . import build

__all__ = [
    "Expr",
    "Number",
    "NumberLiteral",
    "Identifier",
    "BinaryExpression",
    "UnaryExpression",
    "FunctionCall",
    "Fraction",
    "is_number",
    "integer_value",
    "canonical_key",
    "equivalent",
    "build",
    "pp",
    "pps",
]
