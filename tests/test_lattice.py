from fractions import Fraction

import numpy as np
import pytest
import sympy
from polyfactor.algebraic import lll_reduce


def _gram_schmidt(rows):
    rows = [[Fraction(int(c)) for c in row] for row in rows]
    ortho, mu = [], [[Fraction(0)] * len(rows) for _ in rows]
    for i, b in enumerate(rows):
        v = list(b)
        for j, o in enumerate(ortho):
            mu[i][j] = sum(x * y for x, y in zip(b, o)) / sum(y * y for y in o)
            v = [x - mu[i][j] * y for x, y in zip(v, o)]
        ortho.append(v)
    norms = [sum(x * x for x in o) for o in ortho]
    return norms, mu


def _assert_reduced(rows, delta=Fraction(3, 4)):
    norms, mu = _gram_schmidt(rows)
    for i in range(len(rows)):
        for j in range(i):
            assert abs(mu[i][j]) <= Fraction(1, 2)
    for k in range(1, len(rows)):
        assert norms[k] >= (delta - mu[k][k - 1] ** 2) * norms[k - 1]


def _same_lattice(a, b):
    a = sympy.Matrix([[int(c) for c in row] for row in a])
    b = sympy.Matrix([[int(c) for c in row] for row in b])
    transform = b * a.inv()
    assert all(entry.is_integer for entry in transform)
    assert abs(transform.det()) == 1


@pytest.mark.parametrize(
    "basis",
    [
        [[1, 1, 1], [-1, 0, 2], [3, 5, 6]],
        [[105, 821, 404, 328], [0, 667, 644, 927], [0, 0, 87, 500], [0, 0, 0, 441]],
        [[1, 0, 0, 0, 7], [0, 1, 0, 0, 11], [0, 0, 1, 0, 13], [0, 0, 0, 1, 17], [0, 0, 0, 0, 10007]],
    ],
)
def test_lll_reduce(basis):
    reduced = lll_reduce(basis)
    assert reduced.shape == (len(basis), len(basis[0]))
    assert reduced.dtype == object
    _assert_reduced(reduced)
    _same_lattice(basis, reduced)


def test_short_first_vector():
    reduced = lll_reduce(np.array([[1, 1, 1], [-1, 0, 2], [3, 5, 6]], dtype=object))
    # the lattice contains (0, 1, 0); LLL guarantees |b1|^2 <= 2^(n-1) * 1
    assert sum(int(c) ** 2 for c in reduced[0]) <= 4


def test_input_is_not_modified():
    basis = np.array([[3, 5], [1, 2]], dtype=object)
    lll_reduce(basis)
    assert basis.tolist() == [[3, 5], [1, 2]]


def test_big_integers_keep_precision():
    big = 10**40
    reduced = lll_reduce([[1, big], [0, big + 1]])
    _assert_reduced(reduced)
    _same_lattice([[1, big], [0, big + 1]], reduced)


def test_delta_parameter():
    basis = [[1, 1, 1], [-1, 0, 2], [3, 5, 6]]
    _assert_reduced(lll_reduce(basis, Fraction(99, 100)), Fraction(99, 100))
    with pytest.raises(ValueError):
        lll_reduce(basis, Fraction(1, 4))
    with pytest.raises(ValueError):
        lll_reduce(basis, 2)


def test_dependent_basis_is_rejected():
    with pytest.raises(ValueError):
        lll_reduce([[1, 2, 3], [2, 4, 6]])
    with pytest.raises(ValueError):
        lll_reduce([[0, 0], [1, 1]])
