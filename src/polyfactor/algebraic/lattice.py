"""Exact LLL lattice basis reduction over the integers.

The integral variant keeps the Gram-Schmidt data as the integers
d_i = prod |b*_j|^2 (j <= i) and lambda_ij = d_j * mu_ij, so no rational or
floating point value is ever formed. Bases are numpy arrays of dtype=object
holding Python integers, which keeps arbitrary precision through the row
operations.
"""

import logging
from fractions import Fraction
from typing import List, Sequence, Union

import numpy as np

__all__ = ["lll_reduce", "as_integer_matrix"]

logger = logging.getLogger(__name__)


def as_integer_matrix(rows: Union[np.ndarray, Sequence[Sequence[int]]]) -> np.ndarray:
    """Copy `rows` into a 2-d object array of Python ints."""
    data = np.asarray(rows, dtype=object)
    if data.ndim != 2:
        raise ValueError("a lattice basis must be a 2-d array")
    out = np.empty(data.shape, dtype=object)
    for i in range(data.shape[0]):
        for j in range(data.shape[1]):
            out[i, j] = int(data[i, j])
    return out


def lll_reduce(basis, delta: Fraction = Fraction(3, 4)) -> np.ndarray:
    """
    LLL-reduce the rows of `basis`, which must be linearly independent.

    Args:
        basis: integer matrix whose rows span the lattice
        delta: the Lovasz constant, a rational in (1/4, 1]

    Returns:
        A new object array whose rows form a reduced basis of the same lattice.
    """
    delta = Fraction(delta)
    if not Fraction(1, 4) < delta <= 1:
        raise ValueError(f"LLL parameter out of range: {delta}")
    b = as_integer_matrix(basis)
    n = b.shape[0]
    if n <= 1:
        return b

    num, den = delta.numerator, delta.denominator
    # 1-based Gram-Schmidt data; d[0] = 1
    d: List[int] = [0] * (n + 1)
    lam = [[0] * (n + 1) for _ in range(n + 1)]
    d[0] = 1
    d[1] = int(np.dot(b[0], b[0]))
    if d[1] == 0:
        raise ValueError("lattice basis vectors are linearly dependent")

    def row(i):
        return b[i - 1]

    def size_reduce(k, l):
        if 2 * abs(lam[k][l]) > d[l]:
            q = (2 * lam[k][l] + d[l]) // (2 * d[l])
            b[k - 1] = row(k) - q * row(l)
            lam[k][l] -= q * d[l]
            for i in range(1, l):
                lam[k][i] -= q * lam[l][i]

    def swap(k):
        b[[k - 2, k - 1]] = b[[k - 1, k - 2]]
        for j in range(1, k - 1):
            lam[k][j], lam[k - 1][j] = lam[k - 1][j], lam[k][j]
        mu = lam[k][k - 1]
        big = (d[k - 2] * d[k] + mu * mu) // d[k - 1]
        for i in range(k + 1, k_max + 1):
            t = lam[i][k]
            lam[i][k] = (d[k] * lam[i][k - 1] - mu * t) // d[k - 1]
            lam[i][k - 1] = (big * t + mu * lam[i][k]) // d[k]
        d[k - 1] = big

    k, k_max = 2, 1
    swaps = 0
    while k <= n:
        if k > k_max:
            # incremental Gram-Schmidt
            k_max = k
            for j in range(1, k + 1):
                u = int(np.dot(row(k), row(j)))
                for i in range(1, j):
                    u = (d[i] * u - lam[k][i] * lam[j][i]) // d[i - 1]
                if j < k:
                    lam[k][j] = u
                else:
                    d[k] = u
            if d[k] == 0:
                raise ValueError("lattice basis vectors are linearly dependent")

        size_reduce(k, k - 1)
        if den * d[k] * d[k - 2] < num * d[k - 1] ** 2 - den * lam[k][k - 1] ** 2:
            swap(k)
            swaps += 1
            k = max(2, k - 1)
        else:
            for l in range(k - 2, 0, -1):
                size_reduce(k, l)
            k += 1

    logger.debug("LLL reduced a %dx%d basis with %d swaps", n, b.shape[1], swaps)
    return b
