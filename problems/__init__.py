"""
Problem definitions for the GA optimizer.

Continuous benchmark objectives and travelling-salesman helpers that the
GA engine treats as black-box collaborators.
"""

__version__ = "1.0.0"
__author__ = "GA Optimizer Team"

from .objectives import (
    OBJECTIVES,
    distance_matrix,
    get_objective,
    nearest_neighbour_length,
    nearest_neighbour_tour,
    rastrigin,
    rosenbrock,
    sphere,
    tour_length,
)

__all__ = [
    'OBJECTIVES',
    'distance_matrix',
    'get_objective',
    'nearest_neighbour_length',
    'nearest_neighbour_tour',
    'rastrigin',
    'rosenbrock',
    'sphere',
    'tour_length',
]
