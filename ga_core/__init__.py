"""
Genetic Algorithm Optimizer

This package provides a population-based genetic algorithm that minimizes
a black-box objective over either a bounded real vector space or the space
of permutations (e.g. travelling-salesman tours).

Key Features:
- Explicit seeded random stream (fully reproducible runs)
- Permutation-preserving crossover (PMX, OX, CX) and mutation (swap, inversion)
- Truncation selection over parents + offspring with random tie-breaking
- Per-generation score history for convergence diagnostics

Modules:
- data_models: Core data structures (Individual, Population, GenerationRecord, results)
- validation: Configuration checks and error types
- crossover: Uniform-swap, PMX, OX and CX crossover operators
- mutation: Bounded perturbation, point-swap and inversion operators
- generation: One generation step (pairing, offspring, scoring, selection)
- engine: optimize_continuous / optimize_permutation drivers
- io_utils: City CSV loading, history and result export
- orchestration: Run workflows driven by YAML run configs
- cli: Run configuration loading, validation and mode dispatch
"""

__version__ = "0.1.0"
__author__ = "GA Optimizer Team"

from .crossover import CrossoverType
from .data_models import (
    ContinuousResult,
    GenerationRecord,
    Individual,
    PermutationResult,
    Population,
)
from .engine import optimize_continuous, optimize_permutation
from .mutation import MutationType
from .validation import FitnessEvaluationError, InvalidConfigError

__all__ = [
    "ContinuousResult",
    "CrossoverType",
    "FitnessEvaluationError",
    "GenerationRecord",
    "Individual",
    "InvalidConfigError",
    "MutationType",
    "PermutationResult",
    "Population",
    "optimize_continuous",
    "optimize_permutation",
]
