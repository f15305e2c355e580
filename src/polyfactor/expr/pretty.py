"""Pretty printer for expression trees, used for the step trace."""

from __future__ import annotations
import fractions
from typing import Sequence

from .base import (
    BinaryExpression,
    Expr,
    Fraction,
    FunctionCall,
    Identifier,
    NumberLiteral,
    UnaryExpression,
)

# Precedence levels (higher binds tighter)
_PREC_ADD = 30        # +, -
_PREC_MUL = 40        # *, /
_PREC_UNARY = 50      # unary -
_PREC_POW = 60        # ^
_PREC_ATOM = 100      # literals, identifiers, calls


def _prec(expr: Expr) -> int:
    match expr:
        case NumberLiteral(value=v) if v < 0:
            return _PREC_UNARY
        case NumberLiteral() | Identifier() | FunctionCall():
            return _PREC_ATOM
        case UnaryExpression():
            return _PREC_UNARY
        case BinaryExpression(op="+" | "-"):
            return _PREC_ADD
        case BinaryExpression(op="*" | "/") | Fraction():
            return _PREC_MUL
        case BinaryExpression(op="^"):
            return _PREC_POW
    return _PREC_ATOM


def _wrap(inner: str, inner_prec: int, outer_prec: int, *, right: bool = False) -> str:
    """Wrap in parens if the inner expression binds less tightly."""
    # For right operands of non-commutative ops (-, /, ^), also parenthesize at equal precedence.
    needs = inner_prec <= outer_prec if right else inner_prec < outer_prec
    return f"({inner})" if needs else inner


def _fmt_num(v) -> str:
    if isinstance(v, fractions.Fraction):
        return str(v.numerator) if v.denominator == 1 else f"{v.numerator}/{v.denominator}"
    if isinstance(v, float):
        if v != v:  # NaN
            return "NaN"
        if v == int(v) and abs(v) < 1e15:
            return str(int(v))
        return f"{v:g}"
    return str(v)


def _binary(op: str, left: Expr, right: Expr, prec: int) -> str:
    lhs = _wrap(pp(left), _prec(left), prec)
    rhs = _wrap(pp(right), _prec(right), prec, right=op in ("-", "/", "^"))
    if op == "^":
        # x^2 is right-assoc in the usual notation, so parenthesize the base instead
        lhs = _wrap(pp(left), _prec(left), prec, right=True)
        rhs = _wrap(pp(right), _prec(right), _PREC_ATOM - 1)
    if op in ("+", "-"):
        return f"{lhs} {op} {rhs}"
    return f"{lhs}{op}{rhs}"


def pp(expr: Expr) -> str:
    """Pretty-print an expression tree."""
    match expr:
        case NumberLiteral(value):
            return _fmt_num(value)
        case Identifier(name):
            return name
        case UnaryExpression(op, operand):
            return op + _wrap(pp(operand), _prec(operand), _PREC_MUL)
        case BinaryExpression(op, left, right):
            return _binary(op, left, right, _prec(expr))
        case Fraction(numerator, denominator):
            return _binary("/", numerator, denominator, _PREC_MUL)
        case FunctionCall(name, args):
            return f"{name}({', '.join(pp(a) for a in args)})"
    raise TypeError(f"cannot print {expr!r}")


def pps(exprs: Sequence[Expr]) -> list[str]:
    """Pretty-print a list of expressions."""
    return [pp(expr) for expr in exprs]
