from __future__ import annotations
from dataclasses import dataclass
import fractions
from typing import Iterator, List, Tuple, Union

Number = Union[int, float, fractions.Fraction]

BINARY_OPERATORS = ("+", "-", "*", "/", "^")
UNARY_OPERATORS = ("-", "+")


class Expr:
    """Base class of the expression tree.

    Nodes are frozen dataclasses: equality and hashing are structural, and a
    transformation always builds new nodes instead of mutating old ones.
    """

    def children(self) -> List[Expr]:
        """Return the direct sub-expressions."""
        return []

    def walk(self) -> Iterator[Expr]:
        """Pre-order traversal of the tree."""
        yield self
        for child in self.children():
            yield from child.walk()

    def identifiers(self) -> set[str]:
        return {node.name for node in self.walk() if isinstance(node, Identifier)}

    def contains(self, name: str) -> bool:
        """Whether the identifier `name` occurs anywhere in the tree."""
        return any(isinstance(node, Identifier) and node.name == name for node in self.walk())


@dataclass(frozen=True)
class NumberLiteral(Expr):
    value: Number

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float, fractions.Fraction)):
            raise TypeError(f"invalid numeric literal: {self.value!r}")


@dataclass(frozen=True)
class Identifier(Expr):
    name: str


@dataclass(frozen=True)
class BinaryExpression(Expr):
    op: str
    left: Expr
    right: Expr

    def __post_init__(self):
        if self.op not in BINARY_OPERATORS:
            raise ValueError(f"unknown binary operator: {self.op!r}")

    def children(self) -> List[Expr]:
        return [self.left, self.right]


@dataclass(frozen=True)
class UnaryExpression(Expr):
    op: str
    operand: Expr

    def __post_init__(self):
        if self.op not in UNARY_OPERATORS:
            raise ValueError(f"unknown unary operator: {self.op!r}")

    def children(self) -> List[Expr]:
        return [self.operand]


@dataclass(frozen=True)
class FunctionCall(Expr):
    name: str
    args: Tuple[Expr, ...]

    def __post_init__(self):
        # lists are accepted for convenience but stored as a tuple
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    def children(self) -> List[Expr]:
        return list(self.args)


@dataclass(frozen=True)
class Fraction(Expr):
    numerator: Expr
    denominator: Expr

    def children(self) -> List[Expr]:
        return [self.numerator, self.denominator]


def is_number(node: Expr) -> bool:
    return isinstance(node, NumberLiteral)


def integer_value(node: Expr) -> int | None:
    """The value of an integral numeric literal (including `-n`), else None."""
    match node:
        case NumberLiteral(value) if isinstance(value, int):
            return value
        case NumberLiteral(value) if isinstance(value, float) and value.is_integer():
            return int(value)
        case NumberLiteral(value) if isinstance(value, fractions.Fraction) and value.denominator == 1:
            return value.numerator
        case UnaryExpression("-", operand):
            inner = integer_value(operand)
            return None if inner is None else -inner
    return None
