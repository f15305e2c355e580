"""Quadratic Hensel lifting of a modular factorization.

Given f = lc(f) * u_1 * ... * u_r (mod p) with pairwise coprime monic u_i,
`multifactor_lift` returns monic w_i with w_i = u_i (mod p) and
f = lc(f) * w_1 * ... * w_r (mod p^(2^steps)).
"""

import logging
from typing import List, Sequence, Tuple

from .finite_field import gf_gcdex, gf_mul, gf_reduce

__all__ = ["hensel_step", "multifactor_lift", "lift_steps"]

logger = logging.getLogger(__name__)


def _mod(f: Sequence[int], m: int) -> List[int]:
    out = [c % m for c in f]
    while out and out[-1] == 0:
        out.pop()
    return out


def _add(a, b, m):
    n = max(len(a), len(b))
    return _mod([(a[i] if i < len(a) else 0) + (b[i] if i < len(b) else 0) for i in range(n)], m)


def _sub(a, b, m):
    n = max(len(a), len(b))
    return _mod([(a[i] if i < len(a) else 0) - (b[i] if i < len(b) else 0) for i in range(n)], m)


def _mul(a, b, m):
    if not a or not b:
        return []
    out = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x:
            for j, y in enumerate(b):
                out[i + j] += x * y
    return _mod(out, m)


def _divmod_monic(a, b, m) -> Tuple[List[int], List[int]]:
    """Division by a monic b over Z/mZ."""
    assert b and b[-1] % m == 1
    r = list(a)
    db = len(b) - 1
    if len(r) - 1 < db:
        return [], _mod(r, m)
    q = [0] * (len(r) - db)
    for k in range(len(r) - 1 - db, -1, -1):
        c = r[k + db] % m
        q[k] = c
        if c:
            for j, y in enumerate(b):
                r[k + j] -= c * y
    return _mod(q, m), _mod(r[:db], m)


def hensel_step(f, g, h, s, t, m):
    """
    One quadratic lifting step from modulus m to m^2.

    Args:
        f: integer polynomial with f = g*h (mod m)
        g, h: factors with h monic
        s, t: Bezout cofactors with s*g + t*h = 1 (mod m)
        m: the current modulus

    Returns:
        (g, h, s, t) satisfying the same relations modulo m^2, with h still
        monic and of the same degree.
    """
    mm = m * m
    e = _sub(f, _mul(g, h, mm), mm)
    q, r = _divmod_monic(_mul(s, e, mm), h, mm)
    g_new = _add(_add(g, _mul(t, e, mm), mm), _mul(q, g, mm), mm)
    h_new = _add(h, r, mm)

    b = _sub(_add(_mul(s, g_new, mm), _mul(t, h_new, mm), mm), [1], mm)
    c, d = _divmod_monic(_mul(s, b, mm), h_new, mm)
    s_new = _sub(s, d, mm)
    t_new = _sub(_sub(t, _mul(t, b, mm), mm), _mul(c, g_new, mm), mm)
    return g_new, h_new, s_new, t_new


def lift_steps(p: int, bound: int) -> int:
    """Smallest k with p^(2^k) > bound."""
    k, modulus = 0, p
    while modulus <= bound:
        modulus *= modulus
        k += 1
    return k


def multifactor_lift(f: Sequence[int], factors: Sequence[Sequence[int]], p: int, steps: int) -> List[List[int]]:
    """Lift the monic modular factors of f through a balanced factor tree."""
    modulus = p ** (2 ** steps)
    f = _mod(f, modulus)
    if len(factors) == 1:
        inv = pow(f[-1], -1, modulus)
        return [_mod([c * inv for c in f], modulus)]

    k = len(factors) // 2
    g = gf_reduce([f[-1] * c for c in _product(factors[:k], p)], p)
    h = _product(factors[k:], p)
    s, t, one = gf_gcdex(g, h, p)
    assert one == [1], "modular factors must be pairwise coprime"

    m = p
    for _ in range(steps):
        g, h, s, t = hensel_step(f, g, h, s, t, m)
        m *= m
    logger.debug("lifted a %d/%d split of a degree %d factor to modulus %d", k, len(factors) - k, len(f) - 1, m)
    return multifactor_lift(g, factors[:k], p, steps) + multifactor_lift(h, factors[k:], p, steps)


def _product(factors, p):
    result = [1]
    for u in factors:
        result = gf_mul(result, u, p)
    return result
