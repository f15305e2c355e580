from __future__ import annotations
from fractions import Fraction
from functools import reduce
from math import gcd, isqrt
from typing import Iterator, List, Optional, Sequence


def gcd_list(values: Sequence[int]) -> int:
    return reduce(gcd, (abs(v) for v in values), 0)


def lcm(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // gcd(a, b)


def lcm_list(values: Sequence[int]) -> int:
    return reduce(lcm, values, 1)


def fraction_gcd(values: Sequence[Fraction]) -> Fraction:
    """GCD of rationals: gcd of numerators over lcm of denominators."""
    nonzero = [Fraction(v) for v in values if v != 0]
    if not nonzero:
        return Fraction(0)
    num = gcd_list([v.numerator for v in nonzero])
    den = lcm_list([v.denominator for v in nonzero])
    return Fraction(num, den)


def integer_root(n: int, k: int) -> Optional[int]:
    """Return the exact k-th root of n, or None if n is not a perfect k-th power."""
    if k < 1:
        raise ValueError("k must be positive")
    if k == 1:
        return n
    if n < 0:
        if k % 2 == 0:
            return None
        root = integer_root(-n, k)
        return None if root is None else -root
    if n < 2:
        return n
    if k == 2:
        r = isqrt(n)
        return r if r * r == n else None

    # Newton iteration from above
    x = 1 << ((n.bit_length() + k - 1) // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            break
        x = y
    return x if x ** k == n else None


def rational_root(q: Fraction, k: int) -> Optional[Fraction]:
    """Exact k-th root of a rational number, or None."""
    q = Fraction(q)
    num = integer_root(q.numerator, k)
    den = integer_root(q.denominator, k)
    if num is None or den is None:
        return None
    return Fraction(num, den)


def squarefree_split(n: int) -> tuple[int, int]:
    """Write n > 0 as s^2 * m with m squarefree; returns (s, m)."""
    assert n > 0
    s, m = 1, n
    d = 2
    while d * d <= m:
        while m % (d * d) == 0:
            m //= d * d
            s *= d
        d += 1
    return s, m


def divisors(n: int, limit: Optional[int] = None) -> Optional[List[int]]:
    """Positive divisors of |n| in increasing order.

    Returns None when |n| exceeds limit, so callers can skip a search that
    would be too expensive instead of silently truncating it.
    """
    n = abs(n)
    if n == 0:
        return []
    if limit is not None and n > limit:
        return None
    small, large = [], []
    d = 1
    while d * d <= n:
        if n % d == 0:
            small.append(d)
            if d != n // d:
                large.append(n // d)
        d += 1
    return small + large[::-1]


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def primes(start: int = 2) -> Iterator[int]:
    """Yield primes >= start by trial division (only small primes are ever needed)."""
    n = max(start, 2)
    while True:
        if all(n % d for d in range(2, isqrt(n) + 1)):
            yield n
        n += 1


def symmetric_mod(value: int, modulus: int) -> int:
    """Representative of value mod modulus in (-modulus/2, modulus/2]."""
    r = value % modulus
    return r - modulus if r > modulus // 2 else r


def as_fraction(value) -> Fraction:
    """Exact rational for a literal value; floats go through their decimal repr."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"not a finite number: {value}")
        return Fraction(repr(value))
    return Fraction(value)
