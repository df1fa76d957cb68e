"""
Objective Functions and Problem Helpers

Benchmark objectives for continuous runs, plus the travelling-salesman
helpers used by permutation runs: distance matrices, tour length and a
greedy nearest-neighbour baseline.
"""

import math
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ga_core.engine import tour_length


def rosenbrock(x: np.ndarray) -> float:
    """Rosenbrock valley; global minimum 0 at (1, ..., 1)"""
    x = np.asarray(x, dtype=float)
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


def sphere(x: np.ndarray, center: Optional[Sequence[float]] = None) -> float:
    """Squared distance to center (origin by default)"""
    x = np.asarray(x, dtype=float)
    if center is not None:
        x = x - np.asarray(center, dtype=float)
    return float(np.dot(x, x))


def rastrigin(x: np.ndarray) -> float:
    """Rastrigin function; global minimum 0 at the origin"""
    x = np.asarray(x, dtype=float)
    return float(10.0 * len(x) + np.sum(x ** 2 - 10.0 * np.cos(2.0 * math.pi * x)))


OBJECTIVES: Dict[str, Callable[[np.ndarray], float]] = {
    "rosenbrock": rosenbrock,
    "sphere": sphere,
    "rastrigin": rastrigin,
}


def get_objective(name: str) -> Callable[[np.ndarray], float]:
    """
    Look up a continuous objective by name

    Raises:
        KeyError: If the objective is not registered
    """
    try:
        return OBJECTIVES[name.lower()]
    except KeyError:
        valid = ", ".join(sorted(OBJECTIVES))
        raise KeyError(f"Unknown objective: '{name}'. Available: {valid}")


def distance_matrix(coords) -> np.ndarray:
    """
    Build the symmetric Euclidean distance matrix for a set of points

    Args:
        coords: Array-like of shape (n, 2)

    Returns:
        Array of shape (n, n) with zero diagonal
    """
    points = np.asarray(coords, dtype=float)
    diff = points[:, None, :] - points[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=-1))


def nearest_neighbour_tour(d: np.ndarray, start: int = 0) -> np.ndarray:
    """
    Greedy tour: always travel to the closest unvisited city

    Ties go to the lowest city index.

    Args:
        d: Pairwise distance matrix
        start: City to start from

    Returns:
        Permutation of city indices beginning at start
    """
    n = len(d)
    visited = np.zeros(n, dtype=bool)
    tour: List[int] = [start]
    visited[start] = True

    for _ in range(n - 1):
        current = tour[-1]
        candidates = np.where(visited, np.inf, d[current])
        nxt = int(np.argmin(candidates))
        tour.append(nxt)
        visited[nxt] = True

    return np.array(tour, dtype=int)


def nearest_neighbour_length(d: np.ndarray, start: int = 0) -> float:
    """Closed-tour length of the greedy nearest-neighbour baseline"""
    return tour_length(nearest_neighbour_tour(d, start), d)


__all__ = [
    'rosenbrock',
    'sphere',
    'rastrigin',
    'OBJECTIVES',
    'get_objective',
    'distance_matrix',
    'tour_length',
    'nearest_neighbour_tour',
    'nearest_neighbour_length',
]
