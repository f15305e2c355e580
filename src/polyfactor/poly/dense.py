"""Exact dense univariate polynomial arithmetic over Z and Q.

A polynomial is a list of coefficients in ascending order (index = exponent);
the zero polynomial is the empty list. Coefficients are `int` or
`fractions.Fraction`; no floating point value is ever produced here.
"""

from __future__ import annotations
from fractions import Fraction
from typing import List, Mapping, Optional, Sequence, Tuple

from polyfactor.util import gcd_list, lcm_list

Poly = List


def trim(p: Sequence) -> Poly:
    p = list(p)
    while p and p[-1] == 0:
        p.pop()
    return p


def degree(p: Sequence) -> int:
    """Degree of p; the zero polynomial has degree -1."""
    return len(trim(p)) - 1


def leading(p: Sequence):
    p = trim(p)
    return p[-1] if p else 0


def from_mapping(coefficients: Mapping[int, Fraction]) -> Poly:
    if not coefficients:
        return []
    result = [Fraction(0)] * (max(coefficients) + 1)
    for exp, c in coefficients.items():
        if exp < 0:
            raise ValueError("negative exponent in polynomial")
        result[exp] += c
    return trim(result)


def add(a: Sequence, b: Sequence) -> Poly:
    n = max(len(a), len(b))
    return trim([(a[i] if i < len(a) else 0) + (b[i] if i < len(b) else 0) for i in range(n)])


def neg(a: Sequence) -> Poly:
    return [-c for c in a]


def sub(a: Sequence, b: Sequence) -> Poly:
    return add(a, neg(b))


def scale(p: Sequence, c) -> Poly:
    return trim([x * c for x in p])


def mul(a: Sequence, b: Sequence) -> Poly:
    a, b = trim(a), trim(b)
    if not a or not b:
        return []
    result = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x == 0:
            continue
        for j, y in enumerate(b):
            result[i + j] += x * y
    return trim(result)


def pow_(p: Sequence, n: int) -> Poly:
    assert n >= 0
    result: Poly = [1]
    base = trim(p)
    while n:
        if n & 1:
            result = mul(result, base)
        base = mul(base, base)
        n >>= 1
    return result


def product(polys: Sequence[Sequence]) -> Poly:
    result: Poly = [1]
    for p in polys:
        result = mul(result, p)
    return result


def divmod_(a: Sequence, b: Sequence) -> Tuple[Poly, Poly]:
    """Division with remainder over Q."""
    b = trim(b)
    if not b:
        raise ZeroDivisionError("polynomial division by zero")
    r = [Fraction(c) for c in trim(a)]
    db, lb = len(b) - 1, Fraction(b[-1])
    if len(r) - 1 < db:
        return [], trim(r)
    q = [Fraction(0)] * (len(r) - db)
    for k in range(len(r) - 1 - db, -1, -1):
        c = r[k + db] / lb
        q[k] = c
        if c:
            for j, y in enumerate(b):
                r[k + j] -= c * y
    return trim(q), trim(r[:db])


def exact_quotient(a: Sequence, b: Sequence) -> Optional[Poly]:
    """a / b when b divides a exactly over Q, else None. Integral results come back as ints."""
    q, r = divmod_(a, b)
    if r:
        return None
    return as_integers(q) if is_integral(q) else q


def is_integral(p: Sequence) -> bool:
    return all(Fraction(c).denominator == 1 for c in p)


def as_integers(p: Sequence) -> List[int]:
    assert is_integral(p)
    return [int(Fraction(c)) for c in trim(p)]


def derivative(p: Sequence) -> Poly:
    return trim([i * c for i, c in enumerate(p)][1:])


def synthetic_division(p: Sequence, root) -> Tuple[Poly, Fraction]:
    """Divide p by (x - root); returns (quotient, remainder = p(root))."""
    p = trim(p)
    if not p:
        return [], Fraction(0)
    root = Fraction(root)
    acc = Fraction(0)
    out = []
    for c in reversed(p):
        acc = acc * root + c
        out.append(acc)
    remainder = out.pop()
    return trim(out[::-1]), remainder


def monic(p: Sequence) -> Poly:
    p = trim(p)
    if not p:
        return []
    lc = Fraction(p[-1])
    return [Fraction(c) / lc for c in p]


def gcd(a: Sequence, b: Sequence) -> Poly:
    """Monic gcd over Q."""
    a, b = trim(a), trim(b)
    while b:
        _, r = divmod_(a, b)
        a, b = b, r
    return monic(a)


def clear_denominators(p: Sequence) -> Tuple[int, List[int]]:
    """Return (L, q) with q = L * p integral and L the lcm of the denominators."""
    fracs = [Fraction(c) for c in trim(p)]
    lcm = lcm_list([c.denominator for c in fracs]) if fracs else 1
    return lcm, [int(c * lcm) for c in fracs]


def content(p: Sequence[int]) -> int:
    return gcd_list(p)


def primitive_part(p: Sequence[int]) -> Tuple[int, List[int]]:
    """Split an integer polynomial into (signed content, primitive part with positive leading coefficient)."""
    p = trim(p)
    if not p:
        return 0, []
    c = content(p)
    if p[-1] < 0:
        c = -c
    return c, [x // c for x in p]


def primitive(p: Sequence) -> List[int]:
    """Primitive integer associate of a rational polynomial, positive leading coefficient."""
    _, q = clear_denominators(p)
    return primitive_part(q)[1]


def squarefree_decomposition(f: Sequence) -> List[Tuple[List[int], int]]:
    """Yun's algorithm: f = c * prod(a_i ** i) with a_i primitive, squarefree, pairwise coprime.

    Only the non-constant parts are returned, as (a_i, i) pairs.
    """
    f = trim(f)
    if degree(f) < 1:
        return []
    df = derivative(f)
    g = gcd(f, df)
    b = exact_quotient(f, g)
    c = exact_quotient(df, g)
    assert b is not None and c is not None
    d = sub(c, derivative(b))
    result = []
    i = 1
    while degree(b) > 0:
        a = gcd(b, d)
        if degree(a) > 0:
            result.append((primitive(a), i))
        b = exact_quotient(b, a)
        c = exact_quotient(d, a)
        assert b is not None and c is not None
        d = sub(c, derivative(b))
        i += 1
    return result


def compose_power(p: Sequence, k: int) -> Poly:
    """p(x^k)."""
    result = [0] * ((len(p) - 1) * k + 1) if p else []
    for i, c in enumerate(p):
        result[i * k] = c
    return trim(result)


def max_norm(p: Sequence[int]) -> int:
    return max((abs(c) for c in p), default=0)


def norm2_squared(p: Sequence[int]) -> int:
    return sum(c * c for c in p)
