"""
Data models for the GA engine.

Core data structures representing individuals, populations, per-generation
records, and the results returned by the optimization drivers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

import numpy as np


def effective_population_size(population_size: int) -> int:
    """Round a requested population size up to the next even number."""
    return population_size + (population_size % 2)


@dataclass
class Individual:
    """
    Represents a single candidate solution (individual in GA population).

    Attributes:
        genome: Real vector or permutation of indices
        score: Objective value of the genome (lower is better)
    """
    genome: np.ndarray
    score: float

    def copy(self) -> "Individual":
        """
        Create an independent copy of this individual.

        Returns:
            New Individual with a copied genome array
        """
        return Individual(genome=self.genome.copy(), score=self.score)


@dataclass
class Population:
    """
    Ordered collection of individuals.

    Attributes:
        individuals: Members of the population, in rank or creation order
    """
    individuals: List[Individual]

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, index: int) -> Individual:
        return self.individuals[index]

    def scores(self) -> np.ndarray:
        """Scores of all members as a float array."""
        return np.array([ind.score for ind in self.individuals], dtype=float)

    def genomes(self) -> List[np.ndarray]:
        """Genomes of all members."""
        return [ind.genome for ind in self.individuals]

    def best(self) -> Individual:
        """
        Get the lowest-scoring member.

        Returns:
            Individual with the minimum score (first one on ties)

        Raises:
            ValueError: If the population is empty
        """
        if not self.individuals:
            raise ValueError("Cannot take best of an empty population")
        return self.individuals[int(np.argmin(self.scores()))]


@dataclass
class GenerationRecord:
    """
    Outcome of one generation step.

    Attributes:
        generation: 1-based generation number
        scores: Retained scores in rank order (ascending)
        elite: Rank-1 individual of the combined parent+offspring pool
    """
    generation: int
    scores: np.ndarray
    elite: Individual

    @property
    def best(self) -> float:
        return float(self.scores.min())

    @property
    def mean(self) -> float:
        return float(self.scores.mean())

    @property
    def worst(self) -> float:
        return float(self.scores.max())

    def to_dict(self) -> Dict[str, Any]:
        """Summary row with min/mean/max of the retained scores."""
        return {
            "generation": self.generation,
            "min": self.best,
            "mean": self.mean,
            "max": self.worst,
        }


def summarize_history(score_history: np.ndarray) -> List[Dict[str, Any]]:
    """
    Per-generation min/mean/max of a score history matrix.

    Args:
        score_history: Array of shape (num_generations, population_size)

    Returns:
        One dict per generation with keys generation, min, mean, max
    """
    return [
        {
            "generation": g + 1,
            "min": float(row.min()),
            "mean": float(row.mean()),
            "max": float(row.max()),
        }
        for g, row in enumerate(score_history)
    ]


@dataclass
class ContinuousResult:
    """
    Result of a continuous (real vector) optimization run.

    Attributes:
        best_genome: Elite genome of the final generation
        best_score: Score of that genome
        final_population: Retained population after the last generation
        score_history: Retained scores, shape (num_generations, population_size)
        records: Per-generation records
    """
    best_genome: np.ndarray
    best_score: float
    final_population: Population
    score_history: np.ndarray
    records: List[GenerationRecord] = field(default_factory=list)

    def convergence_summary(self) -> List[Dict[str, Any]]:
        return summarize_history(self.score_history)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python representation suitable for YAML export."""
        return {
            "best_genome": [float(v) for v in self.best_genome],
            "best_score": float(self.best_score),
            "num_generations": int(self.score_history.shape[0]),
            "population_size": int(self.score_history.shape[1]),
        }


@dataclass
class PermutationResult:
    """
    Result of a permutation (tour) optimization run.

    Attributes:
        best_tour: Elite permutation of the final generation
        best_length: Score (tour length) of that permutation
        final_population: Retained population after the last generation
        score_history: Retained scores, shape (num_generations, population_size)
        records: Per-generation records
    """
    best_tour: np.ndarray
    best_length: float
    final_population: Population
    score_history: np.ndarray
    records: List[GenerationRecord] = field(default_factory=list)

    def convergence_summary(self) -> List[Dict[str, Any]]:
        return summarize_history(self.score_history)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python representation suitable for YAML export."""
        return {
            "best_tour": [int(v) for v in self.best_tour],
            "best_length": float(self.best_length),
            "num_generations": int(self.score_history.shape[0]),
            "population_size": int(self.score_history.shape[1]),
        }
