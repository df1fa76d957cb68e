"""
Configuration checks for the GA engine.

Every check runs before the first generation so that a bad configuration
never produces a partial run.
"""

from typing import Optional, Sequence

import numpy as np


class InvalidConfigError(ValueError):
    """Raised when optimizer parameters are invalid."""
    pass


class FitnessEvaluationError(RuntimeError):
    """Raised when the objective fails on a genome; aborts the run."""
    pass


def validate_common(
    population_size: int,
    crossover_rate: float,
    num_generations: int,
    rng_seed: Optional[int]
) -> None:
    """
    Validate parameters shared by both optimizer variants.

    Args:
        population_size: Requested population size (rounded up to even later)
        crossover_rate: Probability of crossover vs. mutation per pair
        num_generations: Number of generation steps to run
        rng_seed: Seed for the run's random stream

    Raises:
        InvalidConfigError: If any parameter is out of range
    """
    if population_size < 2:
        raise InvalidConfigError(
            f"population_size must be at least 2, got: {population_size}"
        )
    if num_generations < 1:
        raise InvalidConfigError(
            f"num_generations must be at least 1, got: {num_generations}"
        )
    if not 0.0 <= crossover_rate <= 1.0:
        raise InvalidConfigError(
            f"crossover_rate must be in [0, 1], got: {crossover_rate}"
        )
    if rng_seed is None:
        raise InvalidConfigError("rng_seed is required for reproducible runs")


def validate_bounds(n: int, bounds: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Validate per-dimension bounds and convert them to an (n, 2) array.

    Args:
        n: Number of dimensions
        bounds: Sequence of (lo, hi) pairs, one per dimension

    Returns:
        Float array of shape (n, 2)

    Raises:
        InvalidConfigError: If shape is wrong, a bound is not finite,
            or any lo >= hi
    """
    if n < 1:
        raise InvalidConfigError(f"n must be at least 1, got: {n}")

    bounds_array = np.asarray(bounds, dtype=float)
    if bounds_array.shape != (n, 2):
        raise InvalidConfigError(
            f"bounds must have shape ({n}, 2), got: {bounds_array.shape}"
        )
    if not np.all(np.isfinite(bounds_array)):
        raise InvalidConfigError("bounds must be finite")

    for i, (lo, hi) in enumerate(bounds_array):
        if lo >= hi:
            raise InvalidConfigError(
                f"bounds[{i}] must satisfy lo < hi, got: ({lo}, {hi})"
            )

    return bounds_array


def validate_step_ratio(mutation_step_ratio: float) -> None:
    """Reject non-positive mutation step ratios."""
    if not mutation_step_ratio > 0:
        raise InvalidConfigError(
            f"mutation_step_ratio must be positive, got: {mutation_step_ratio}"
        )


def validate_distance_matrix(n: int, distance_matrix) -> np.ndarray:
    """
    Validate a pairwise distance matrix for an n-city permutation problem.

    The diagonal is not checked.

    Args:
        n: Number of cities
        distance_matrix: Square matrix of pairwise distances

    Returns:
        Float array of shape (n, n)

    Raises:
        InvalidConfigError: If n < 2, or the matrix is not n x n,
            not symmetric, negative, or not finite
    """
    if n < 2:
        raise InvalidConfigError(f"n must be at least 2 for permutations, got: {n}")

    d = np.asarray(distance_matrix, dtype=float)
    if d.ndim != 2 or d.shape[0] != d.shape[1]:
        raise InvalidConfigError(f"distance matrix must be square, got shape: {d.shape}")
    if d.shape[0] != n:
        raise InvalidConfigError(
            f"distance matrix must be {n}x{n}, got: {d.shape[0]}x{d.shape[1]}"
        )

    off_diagonal = ~np.eye(n, dtype=bool)
    if not np.all(np.isfinite(d[off_diagonal])):
        raise InvalidConfigError("distance matrix must be finite off the diagonal")
    if np.any(d[off_diagonal] < 0):
        raise InvalidConfigError("distance matrix must be non-negative")
    if not np.allclose(d[off_diagonal], d.T[off_diagonal]):
        raise InvalidConfigError("distance matrix must be symmetric")

    return d
