"""
Mutation operators for the GA engine.

Implements bounded perturbation for real vectors and point-swap and
segment-inversion for permutations. Operators return new arrays and
never modify their input.
"""

from enum import Enum
from typing import Callable, Dict, Union

import numpy as np

from .validation import InvalidConfigError


class MutationType(Enum):
    """Permutation mutation operators."""
    POINT_SWAP = "point_swap"
    INVERSION = "inversion"


def bounded_perturbation(
    genome: np.ndarray,
    bounds: np.ndarray,
    step_ratio: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Perturb one randomly chosen coordinate and clamp it into its bounds.

    The perturbation is drawn uniformly from [-step, +step] with
    step = step_ratio * (hi - lo) for the chosen dimension.

    Args:
        genome: Real vector to mutate
        bounds: Array of shape (n, 2) with (lo, hi) per dimension
        step_ratio: Fraction of a dimension's range used as maximum step
        rng: Random number generator

    Returns:
        Mutated copy of genome
    """
    mutated = genome.astype(float, copy=True)
    k = int(rng.integers(0, len(mutated)))
    lo, hi = bounds[k]

    max_step = step_ratio * (hi - lo)
    mutated[k] = min(max(mutated[k] + rng.uniform(-max_step, max_step), lo), hi)

    return mutated


def point_swap(genome: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Exchange the values at two distinct random positions.

    Args:
        genome: Permutation to mutate
        rng: Random number generator

    Returns:
        Mutated copy of genome
    """
    mutated = genome.copy()
    i, j = rng.choice(len(mutated), size=2, replace=False)
    mutated[[i, j]] = mutated[[j, i]]
    return mutated


def inversion(genome: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Reverse the sub-sequence between two random positions (inclusive).

    Args:
        genome: Permutation to mutate
        rng: Random number generator

    Returns:
        Mutated copy of genome
    """
    mutated = genome.copy()
    i, j = sorted(int(k) for k in rng.choice(len(mutated), size=2, replace=False))
    mutated[i:j + 1] = mutated[i:j + 1][::-1]
    return mutated


MUTATION_OPERATORS: Dict[MutationType, Callable] = {
    MutationType.POINT_SWAP: point_swap,
    MutationType.INVERSION: inversion,
}


def parse_mutation_type(op: Union[MutationType, str]) -> MutationType:
    """
    Convert an operator name ("point_swap", "inversion") to a MutationType.

    Raises:
        InvalidConfigError: If the name is unknown
    """
    if isinstance(op, MutationType):
        return op
    try:
        return MutationType(str(op).lower())
    except ValueError:
        valid = ", ".join(t.value for t in MutationType)
        raise InvalidConfigError(f"Unknown mutation operator: '{op}'. Must be one of: {valid}")


def apply_mutation(
    op: Union[MutationType, str],
    genome: np.ndarray,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Apply the selected permutation mutation operator.

    Args:
        op: Operator type or its name
        genome: Permutation to mutate
        rng: Random number generator

    Returns:
        Mutated copy of genome
    """
    return MUTATION_OPERATORS[parse_mutation_type(op)](genome, rng)
