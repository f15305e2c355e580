"""Factorization of univariate polynomials over the integers.

Pipeline: content and squarefree decomposition, Berlekamp factorization
modulo a well-chosen prime, quadratic Hensel lifting, then recombination of
the lifted factors into true factors. Recombination tries subset products
of growing size while that stays cheap and hands what is left to lattice
reduction. Every factor is accepted only after exact division.
"""

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from functools import reduce
from itertools import combinations
from math import comb, isqrt
from typing import List, Optional, Sequence, Tuple

import numpy as np

from polyfactor.config import DEFAULT_CONFIG, FactorConfig
from polyfactor.errors import Irreducible, NoProgress, VerificationFailure
from polyfactor.poly import dense
from polyfactor.util import primes, symmetric_mod
from .finite_field import gf_divmod, gf_factor, gf_is_squarefree, gf_reduce
from .hensel import lift_steps, multifactor_lift
from .lattice import lll_reduce

__all__ = ["IntegerFactorization", "IntegerPolynomialFactorizer", "factor_integer_polynomial"]

logger = logging.getLogger(__name__)


@dataclass
class IntegerFactorization:
    """f = content * prod(g ** m for g, m in factors), every g primitive with positive leading coefficient."""

    content: Fraction
    factors: List[Tuple[List[int], int]] = field(default_factory=list)

    def expand(self) -> List[Fraction]:
        result = dense.scale([1], self.content)
        for g, m in self.factors:
            result = dense.mul(result, dense.pow_(g, m))
        return [Fraction(c) for c in result]

    @property
    def factor_count(self) -> int:
        return sum(m for _, m in self.factors)


def zassenhaus_bound(f: Sequence[int]) -> int:
    """Bound on the coefficients of any factor of f times lc(f)."""
    n = dense.degree(f)
    return (isqrt(n + 1) + 1) * 2 ** n * dense.max_norm(f) * abs(f[-1])


def lattice_bound(f: Sequence[int], d: int = 1) -> int:
    """
    Modulus p^e making lattice recombination exact for modular factors of degree >= d.

    Every factor g of f has |g|^2 <= G = 4^n |f|^2, and a reduced basis
    vector is at most 2^(n-1) G in squared norm, so p^(2 e d) must exceed
    2^(n(n-1)) * G^(2n-1). The d-th root is rounded up to a power of two.
    """
    n = dense.degree(f)
    g = 4 ** n * dense.norm2_squared(f)
    squared = 2 ** (n * (n - 1)) * g ** (2 * n - 1)
    return 1 << -(-squared.bit_length() // (2 * d))


def _symmetric(f: Sequence[int], modulus: int) -> List[int]:
    return dense.trim([symmetric_mod(c, modulus) for c in f])


def _mul_mod(polys, modulus, start):
    result = list(start)
    for u in polys:
        result = [c % modulus for c in dense.mul(result, u)]
    return result


class IntegerPolynomialFactorizer:
    def __init__(self, config: FactorConfig = DEFAULT_CONFIG):
        self.config = config

    def factor(self, coefficients: Sequence) -> IntegerFactorization:
        """
        Factor a polynomial with rational coefficients (ascending order) over Z.

        Raises:
            Irreducible: the primitive part does not split.
            VerificationFailure: the factors do not multiply back to the input.
        """
        original = [Fraction(c) for c in dense.trim(coefficients)]
        if not original:
            raise ValueError("cannot factor the zero polynomial")
        denominator, integral = dense.clear_denominators(original)
        content, prim = dense.primitive_part(integral)
        result = IntegerFactorization(Fraction(content, denominator))
        if dense.degree(prim) < 1:
            return result

        parts = dense.squarefree_decomposition(prim)
        for part, multiplicity in parts:
            for g in self.factor_squarefree(part):
                result.factors.append((g, multiplicity))
        result.factors.sort(key=lambda item: (len(item[0]), item[0]))

        if result.expand() != original:
            raise VerificationFailure("integer factors do not multiply back to the input")
        if len(result.factors) == 1 and result.factors[0][1] == 1:
            raise Irreducible(prim)
        logger.debug("factored degree %d into %d factors", dense.degree(prim), result.factor_count)
        return result

    def factor_squarefree(self, f: Sequence[int]) -> List[List[int]]:
        """Irreducible factors of a primitive squarefree f with positive leading coefficient."""
        f = list(f)
        factors: List[List[int]] = []
        if f[0] == 0:
            # x divides a squarefree f at most once
            factors.append([0, 1])
            f = f[1:]
        if dense.degree(f) < 1:
            return factors
        if dense.degree(f) == 1:
            return factors + [f]

        p, modular = self.choose_prime(f)
        if len(modular) == 1:
            logger.debug("degree %d polynomial is irreducible mod %d", dense.degree(f), p)
            return factors + [f]

        exhaustive = len(modular) <= self.config.max_subset_factors
        bound = 2 * zassenhaus_bound(f)
        if not exhaustive:
            bound = max(bound, lattice_bound(f, min(dense.degree(u) for u in modular)))
        steps = lift_steps(p, bound)
        modulus = p ** (2 ** steps)
        lifted = multifactor_lift(f, modular, p, steps)
        logger.debug("lifted %d factors mod %d to precision %d^%d", len(modular), p, p, 2 ** steps)

        found, rest, remaining, complete = self._recombine_subsets(f, lifted, modulus, exhaustive)
        factors += found
        if complete:
            if dense.degree(rest) > 0:
                factors.append(dense.primitive_part(rest)[1])
            return factors

        if dense.degree(rest) > self.config.max_lattice_degree:
            raise NoProgress(
                f"recombining {len(remaining)} modular factors of a degree {dense.degree(rest)} factor "
                f"exceeds max_lattice_degree={self.config.max_lattice_degree}"
            )
        logger.debug("switching to lattice recombination with %d modular factors left", len(remaining))
        norm_bound = 4 ** dense.degree(f) * dense.norm2_squared(f)
        return factors + self._recombine_lattice(rest, remaining, p, modulus, norm_bound, dense.degree(f))

    def choose_prime(self, f: Sequence[int]) -> Tuple[int, List[List[int]]]:
        """
        Pick a prime not dividing lc(f) modulo which f stays squarefree.

        Among the first `prime_trials` such primes the one giving the fewest
        modular factors wins; a single factor ends the search at once.
        """
        best: Optional[Tuple[int, List[List[int]]]] = None
        trials = 0
        for p in primes(2):
            if f[-1] % p == 0 or not gf_is_squarefree(f, p):
                continue
            _, modular = gf_factor(f, p)
            trials += 1
            if best is None or len(modular) < len(best[1]):
                best = (p, modular)
            if len(modular) == 1 or trials >= self.config.prime_trials:
                break
        assert best is not None
        logger.debug("chose p=%d with %d modular factors", best[0], len(best[1]))
        return best

    def _recombine_subsets(self, f: List[int], lifted: List[List[int]], modulus: int, exhaustive: bool):
        """
        Try products of lifted factors in order of growing subset size.

        Returns the factors found, the cofactor left, the unused lifted factors
        and whether the search was complete. A non-exhaustive search stops at
        the first size with more than `max_subset_candidates` subsets.
        """
        found: List[List[int]] = []
        remaining = list(lifted)
        size = 1
        while 2 * size <= len(remaining):
            if not exhaustive and comb(len(remaining), size) > self.config.max_subset_candidates:
                return found, f, remaining, False
            accepted = None
            lc = f[-1]
            for subset in combinations(range(len(remaining)), size):
                candidate = _symmetric(_mul_mod((remaining[i] for i in subset), modulus, [lc]), modulus)
                # constant terms of true factors divide lc(f) * f(0)
                if f[0] != 0 and (candidate[0] == 0 or (lc * f[0]) % candidate[0] != 0):
                    continue
                g = dense.primitive_part(candidate)[1]
                quotient = dense.exact_quotient(f, g)
                if quotient is not None and dense.is_integral(quotient):
                    accepted = subset, g, dense.as_integers(quotient)
                    break
            if accepted is None:
                size += 1
                continue
            subset, g, f = accepted
            found.append(g)
            remaining = [u for i, u in enumerate(remaining) if i not in subset]
        return found, f, remaining, True

    def _recombine_lattice(self, f, lifted, p, modulus, norm_bound, n) -> List[List[int]]:
        found: List[List[int]] = []
        remaining = list(lifted)
        while len(remaining) > 1:
            remaining.sort(key=len)
            u = remaining[0]
            g = self._short_vector_factor(f, u, modulus, norm_bound, n)
            if g is None:
                break
            found.append(g)
            f = dense.as_integers(dense.exact_quotient(f, g))
            g_mod = gf_reduce(g, p)
            remaining = [w for w in remaining if gf_divmod(g_mod, gf_reduce(w, p), p)[1]]
        if dense.degree(f) > 0:
            found.append(dense.primitive_part(f)[1])
        return found

    def _short_vector_factor(self, f, u, modulus, norm_bound, n) -> Optional[List[int]]:
        """
        The irreducible factor h of f that u divides modulo p, or None when h = f.

        Polynomials of degree <= m divisible by u mod p^e form a lattice. A
        reduced vector b with norm_bound^m * |b|^(2n) < p^(2 e deg u) is a
        multiple of h, and once m >= deg h the gcd of all such vectors is h.
        Only the degrees m = (deg f - 1) >> k are tried, so at most
        log2(deg f) reductions run per factor.
        """
        d = dense.degree(u)
        top = dense.degree(f) - 1
        target = modulus ** (2 * d)
        for m in sorted({top >> k for k in range(top.bit_length() + 1)}):
            if m < d:
                continue
            rows = []
            for i in range(m + 1 - d):
                rows.append([0] * i + list(u) + [0] * (m - d - i))
            for i in range(d):
                rows.append([modulus if k == i else 0 for k in range(m + 1)])
            reduced = lll_reduce(np.array(rows, dtype=object), self.config.lll_delta)
            short = []
            for row in reduced:
                b = dense.trim([int(c) for c in row])
                if norm_bound ** m * dense.norm2_squared(b) ** n < target:
                    short.append(b)
            if not short:
                continue
            g = dense.primitive(reduce(dense.gcd, short))
            if dense.degree(g) < 1:
                continue
            quotient = dense.exact_quotient(f, g)
            if quotient is not None and dense.is_integral(quotient):
                logger.debug("lattice of dimension %d gave a degree %d factor", m + 1, dense.degree(g))
                return g
        return None


def factor_integer_polynomial(coefficients: Sequence, config: FactorConfig = DEFAULT_CONFIG) -> IntegerFactorization:
    return IntegerPolynomialFactorizer(config).factor(coefficients)
