"""Polynomial arithmetic over GF(p) and Berlekamp factorization.

Polynomials are ascending coefficient lists of integers in [0, p); the zero
polynomial is the empty list. `p` is always a (small) prime.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

__all__ = [
    "gf_reduce",
    "gf_add",
    "gf_sub",
    "gf_mul",
    "gf_scale",
    "gf_divmod",
    "gf_monic",
    "gf_gcd",
    "gf_gcdex",
    "gf_pow_mod",
    "gf_derivative",
    "gf_is_squarefree",
    "berlekamp",
    "gf_factor",
]

logger = logging.getLogger(__name__)

GFPoly = List[int]


def _trim(p: List[int]) -> GFPoly:
    while p and p[-1] == 0:
        p.pop()
    return p


def gf_reduce(f: Sequence[int], p: int) -> GFPoly:
    return _trim([c % p for c in f])


def gf_add(a: Sequence[int], b: Sequence[int], p: int) -> GFPoly:
    n = max(len(a), len(b))
    return _trim([((a[i] if i < len(a) else 0) + (b[i] if i < len(b) else 0)) % p for i in range(n)])


def gf_sub(a: Sequence[int], b: Sequence[int], p: int) -> GFPoly:
    n = max(len(a), len(b))
    return _trim([((a[i] if i < len(a) else 0) - (b[i] if i < len(b) else 0)) % p for i in range(n)])


def gf_scale(a: Sequence[int], c: int, p: int) -> GFPoly:
    return _trim([x * c % p for x in a])


def gf_mul(a: Sequence[int], b: Sequence[int], p: int) -> GFPoly:
    if not a or not b:
        return []
    result = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x:
            for j, y in enumerate(b):
                result[i + j] += x * y
    return gf_reduce(result, p)


def gf_divmod(a: Sequence[int], b: Sequence[int], p: int) -> Tuple[GFPoly, GFPoly]:
    if not b:
        raise ZeroDivisionError("polynomial division by zero in GF(p)")
    r = list(a)
    db = len(b) - 1
    if len(r) - 1 < db:
        return [], _trim(r)
    inv = pow(b[-1], -1, p)
    q = [0] * (len(r) - db)
    for k in range(len(r) - 1 - db, -1, -1):
        c = r[k + db] * inv % p
        q[k] = c
        if c:
            for j, y in enumerate(b):
                r[k + j] = (r[k + j] - c * y) % p
    return _trim(q), _trim(r[:db])


def gf_monic(a: Sequence[int], p: int) -> GFPoly:
    if not a:
        return []
    return gf_scale(a, pow(a[-1], -1, p), p)


def gf_gcd(a: Sequence[int], b: Sequence[int], p: int) -> GFPoly:
    a, b = list(a), list(b)
    while b:
        a, b = b, gf_divmod(a, b, p)[1]
    return gf_monic(a, p)


def gf_gcdex(a: Sequence[int], b: Sequence[int], p: int) -> Tuple[GFPoly, GFPoly, GFPoly]:
    """Extended Euclid: returns (s, t, g) with s*a + t*b = g = gcd(a, b), g monic."""
    r0, r1 = list(a), list(b)
    s0, s1 = [1], []
    t0, t1 = [], [1]
    while r1:
        q, r = gf_divmod(r0, r1, p)
        r0, r1 = r1, r
        s0, s1 = s1, gf_sub(s0, gf_mul(q, s1, p), p)
        t0, t1 = t1, gf_sub(t0, gf_mul(q, t1, p), p)
    if not r0:
        return s0, t0, r0
    inv = pow(r0[-1], -1, p)
    return gf_scale(s0, inv, p), gf_scale(t0, inv, p), gf_scale(r0, inv, p)


def gf_pow_mod(f: Sequence[int], n: int, modulus: Sequence[int], p: int) -> GFPoly:
    """f^n mod (modulus, p) by repeated squaring."""
    result = [1]
    base = gf_divmod(f, modulus, p)[1]
    while n:
        if n & 1:
            result = gf_divmod(gf_mul(result, base, p), modulus, p)[1]
        base = gf_divmod(gf_mul(base, base, p), modulus, p)[1]
        n >>= 1
    return result


def gf_derivative(f: Sequence[int], p: int) -> GFPoly:
    return _trim([i * c % p for i, c in enumerate(f)][1:])


def gf_is_squarefree(f: Sequence[int], p: int) -> bool:
    f = gf_reduce(f, p)
    if len(f) <= 2:
        return True
    df = gf_derivative(f, p)
    if not df:
        return False
    return len(gf_gcd(f, df, p)) == 1


def _nullspace(matrix: List[List[int]], p: int) -> List[List[int]]:
    """Basis of the right kernel of `matrix` over GF(p), by reduced row echelon form."""
    m = [list(row) for row in matrix]
    rows, cols = len(m), len(m[0]) if m else 0
    pivots: List[int] = []
    r = 0
    for c in range(cols):
        pivot = next((i for i in range(r, rows) if m[i][c] % p), None)
        if pivot is None:
            continue
        m[r], m[pivot] = m[pivot], m[r]
        inv = pow(m[r][c], -1, p)
        m[r] = [x * inv % p for x in m[r]]
        for i in range(rows):
            if i != r and m[i][c]:
                factor = m[i][c]
                m[i] = [(x - factor * y) % p for x, y in zip(m[i], m[r])]
        pivots.append(c)
        r += 1
        if r == rows:
            break

    basis = []
    for free in (c for c in range(cols) if c not in pivots):
        v = [0] * cols
        v[free] = 1
        for i, pc in enumerate(pivots):
            v[pc] = -m[i][free] % p
        basis.append(v)
    return basis


def _berlekamp_matrix(f: GFPoly, p: int) -> np.ndarray:
    """Row i holds x^(p*i) mod f."""
    n = len(f) - 1
    xp = gf_pow_mod([0, 1], p, f, p)
    q = np.zeros((n, n), dtype=object)
    row = [1]
    for i in range(n):
        for j, c in enumerate(row):
            q[i, j] = c
        row = gf_divmod(gf_mul(row, xp, p), f, p)[1]
    return q


def berlekamp(f: Sequence[int], p: int) -> List[GFPoly]:
    """
    Factor a monic squarefree polynomial over GF(p) into monic irreducibles.

    The fixed space of the Frobenius map g -> g^p (mod f) has dimension equal
    to the number of irreducible factors; each non-constant element v of it
    splits f into the pieces gcd(f, v - s), s in GF(p).
    """
    f = gf_reduce(f, p)
    assert f and f[-1] == 1, "berlekamp expects a monic polynomial"
    n = len(f) - 1
    if n <= 1:
        return [f]

    q = _berlekamp_matrix(f, p)
    identity = np.array([[int(i == j) for j in range(n)] for i in range(n)], dtype=object)
    kernel = _nullspace(((q - identity).T % p).tolist(), p)
    r = len(kernel)
    logger.debug("berlekamp: degree %d mod %d has %d irreducible factors", n, p, r)

    factors = [f]
    for v in kernel:
        if len(factors) == r:
            break
        v = _trim(list(v))
        if len(v) <= 1:
            continue
        split: List[GFPoly] = []
        for u in factors:
            if len(u) <= 2:
                split.append(u)
                continue
            pieces = [g for s in range(p) if len(g := gf_gcd(u, gf_sub(v, [s], p), p)) > 1]
            split.extend(pieces if len(pieces) > 1 else [u])
        factors = split
    assert len(factors) == r
    return sorted(factors, key=lambda u: (len(u), u))


def gf_factor(f: Sequence[int], p: int) -> Tuple[int, List[GFPoly]]:
    """Return (leading coefficient, monic irreducible factors) of a squarefree f over GF(p)."""
    f = gf_reduce(f, p)
    if not f:
        raise ValueError("cannot factor the zero polynomial")
    lc = f[-1]
    return lc, berlekamp(gf_monic(f, p), p)
