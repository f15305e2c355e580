from .finite_field import berlekamp, gf_factor, gf_gcdex, gf_is_squarefree
from .hensel import hensel_step, lift_steps, multifactor_lift
from .lattice import lll_reduce
from .zassenhaus import IntegerFactorization, IntegerPolynomialFactorizer, factor_integer_polynomial

__all__ = [
    "berlekamp",
    "gf_factor",
    "gf_gcdex",
    "gf_is_squarefree",
    "hensel_step",
    "lift_steps",
    "multifactor_lift",
    "lll_reduce",
    "IntegerFactorization",
    "IntegerPolynomialFactorizer",
    "factor_integer_polynomial",
]
