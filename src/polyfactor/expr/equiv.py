"""Structural equality up to the order of commutative operands.

`canonical_key` maps a tree to a hashable nested tuple: `+`/`*` chains are
flattened and their operands sorted, `a - b` is read as `a + (-b)`, negation
is folded into numeric literals and numeric fractions collapse to a rational.
Two trees are `equivalent` when their keys agree. No algebra beyond that is
performed; see `polyfactor.poly.normalize` for algebraic equality.
"""

from __future__ import annotations
from typing import List, Tuple

from polyfactor.util import as_fraction
from .base import (
    BinaryExpression,
    Expr,
    Fraction,
    FunctionCall,
    Identifier,
    NumberLiteral,
    UnaryExpression,
)

Key = Tuple


def canonical_key(node: Expr) -> Key:
    match node:
        case NumberLiteral(value):
            return ("num", as_fraction(value))
        case Identifier(name):
            return ("var", name)
        case UnaryExpression("+", operand):
            return canonical_key(operand)
        case UnaryExpression("-", operand):
            return _negated(canonical_key(operand))
        case BinaryExpression("+" | "-"):
            return ("+", tuple(sorted(_sum_keys(node, False))))
        case BinaryExpression("*"):
            return ("*", tuple(sorted(canonical_key(f) for f in _factors(node))))
        case BinaryExpression("/", left, right) | Fraction(left, right):
            num, den = canonical_key(left), canonical_key(right)
            if num[0] == "num" and den[0] == "num" and den[1] != 0:
                return ("num", num[1] / den[1])
            return ("/", num, den)
        case BinaryExpression("^", left, right):
            return ("^", canonical_key(left), canonical_key(right))
        case FunctionCall(name, args):
            return ("call", name, tuple(canonical_key(a) for a in args))
    raise TypeError(f"not an expression: {node!r}")


def equivalent(a: Expr, b: Expr) -> bool:
    return canonical_key(a) == canonical_key(b)


def _negated(key: Key) -> Key:
    if key[0] == "num":
        return ("num", -key[1])
    if key[0] == "neg":
        return key[1]
    return ("neg", key)


def _sum_keys(node: Expr, negative: bool) -> List[Key]:
    match node:
        case BinaryExpression("+", left, right):
            return _sum_keys(left, negative) + _sum_keys(right, negative)
        case BinaryExpression("-", left, right):
            return _sum_keys(left, negative) + _sum_keys(right, not negative)
    key = canonical_key(node)
    return [_negated(key) if negative else key]


def _factors(node: Expr) -> List[Expr]:
    match node:
        case BinaryExpression("*", left, right):
            return _factors(left) + _factors(right)
    return [node]
