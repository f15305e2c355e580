from __future__ import annotations
from dataclasses import dataclass, field, replace
from fractions import Fraction


@dataclass(frozen=True)
class FactorConfig:
    """Tunables for the engine, handed to the dispatcher and strategies at construction."""

    # dispatcher
    max_iterations: int = 10
    max_depth: int = 12
    normalize_input: bool = True
    verify_results: bool = True

    # allow factors with radicals (sqrt) in their coefficients
    allow_irrational_factors: bool = False

    # expansion (normalizer)
    max_expansion_power: int = 32

    # search gates of the pattern strategies
    max_perfect_power_degree: int = 8
    divisor_search_limit: int = 10**6
    ac_search_limit: int = 10**8
    max_binomial_degree: int = 64

    # algebraic subsystem
    max_algebraic_degree: int = 40
    # subset recombination is exhaustive up to max_subset_factors modular factors;
    # past that, sizes with more than max_subset_candidates subsets go to the lattice
    max_subset_factors: int = 12
    max_subset_candidates: int = 4096
    max_lattice_degree: int = 32
    prime_trials: int = 5
    lll_delta: Fraction = field(default=Fraction(3, 4))

    def with_changes(self, **changes) -> FactorConfig:
        return replace(self, **changes)


DEFAULT_CONFIG = FactorConfig()
