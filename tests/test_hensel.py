import pytest
from polyfactor.algebraic import gf_factor, gf_gcdex, hensel_step, lift_steps, multifactor_lift
from polyfactor.algebraic.finite_field import gf_reduce
from polyfactor.poly import dense


def _mod(f, m):
    return gf_reduce(f, m)


def test_lift_steps():
    assert lift_steps(5, 4) == 0
    assert lift_steps(5, 5) == 1
    assert lift_steps(5, 624) == 2
    assert lift_steps(5, 625) == 3


def test_single_hensel_step():
    # x^2 + 1 = (x + 3)(x + 2) mod 5
    f = [1, 0, 1]
    g, h = [3, 1], [2, 1]
    s, t, one = gf_gcdex(g, h, 5)
    assert one == [1]
    g2, h2, s2, t2 = hensel_step(f, g, h, s, t, 5)
    assert _mod(dense.mul(g2, h2), 25) == _mod(f, 25)
    assert _mod(g2, 5) == g and _mod(h2, 5) == h
    assert _mod(dense.add(dense.mul(s2, g2), dense.mul(t2, h2)), 25) == [1]


@pytest.mark.parametrize(
    "f, p",
    [
        ([1, 0, 1], 5),
        ([1, 5, 6], 7),
        ([-1, 0, 0, 0, 1], 5),
        ([2, -2, 0, 0, 1], 3),
    ],
)
def test_multifactor_lift(f, p):
    lc, modular = gf_factor(f, p)
    steps = 3
    modulus = p ** (2 ** steps)
    lifted = multifactor_lift(f, modular, p, steps)
    assert len(lifted) == len(modular)
    for w, u in zip(lifted, modular):
        assert w[-1] == 1
        assert _mod(w, p) == u
    product = [f[-1]]
    for w in lifted:
        product = dense.mul(product, w)
    assert _mod(product, modulus) == _mod(f, modulus)
