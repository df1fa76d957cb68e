"""
Generation step for the GA engine.

Pairs parents, creates offspring by crossover or mutation, scores them,
and performs truncation selection over the combined parent+offspring pool.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .data_models import GenerationRecord, Individual, Population
from .validation import FitnessEvaluationError

Genome = np.ndarray
FitnessFn = Callable[[Genome], float]
CrossoverFn = Callable[[Genome, Genome, np.random.Generator], Tuple[Genome, Genome]]
MutationFn = Callable[[Genome, np.random.Generator], Genome]


def evaluate_genome(fitness: FitnessFn, genome: Genome) -> float:
    """
    Score one genome.

    Args:
        fitness: Objective function (minimized)
        genome: Genome to score

    Returns:
        Objective value as float

    Raises:
        FitnessEvaluationError: If the objective raises or returns NaN
    """
    try:
        score = float(fitness(genome))
    except Exception as e:
        raise FitnessEvaluationError(f"Fitness evaluation failed for genome {genome.tolist()}: {e}") from e

    if math.isnan(score):
        raise FitnessEvaluationError(f"Fitness returned NaN for genome {genome.tolist()}")

    return score


def evaluate_genomes(
    fitness: FitnessFn,
    genomes: Sequence[Genome],
    n_workers: int = 1
) -> List[Individual]:
    """
    Score a batch of genomes, optionally across worker threads.

    Results keep the input order regardless of n_workers.

    Args:
        fitness: Objective function (minimized)
        genomes: Genomes to score
        n_workers: Number of threads (1 evaluates sequentially)

    Returns:
        List of Individuals aligned with genomes
    """
    if n_workers > 1 and len(genomes) > 1:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            scores = list(executor.map(lambda g: evaluate_genome(fitness, g), genomes))
    else:
        scores = [evaluate_genome(fitness, g) for g in genomes]

    return [Individual(genome=g, score=s) for g, s in zip(genomes, scores)]


def pair_parents(population_size: int, rng: np.random.Generator) -> np.ndarray:
    """
    Shuffle parent indices and split them into disjoint ordered pairs.

    Args:
        population_size: Even number of parents
        rng: Random number generator

    Returns:
        Integer array of shape (population_size // 2, 2)
    """
    return rng.permutation(population_size).reshape(-1, 2)


def make_offspring(
    population: Population,
    crossover_rate: float,
    crossover_fn: CrossoverFn,
    mutation_fn: MutationFn,
    rng: np.random.Generator
) -> Tuple[List[Genome], List[str]]:
    """
    Create one offspring genome per parent.

    For each pair, crossover is applied with probability crossover_rate;
    otherwise each parent of the pair is mutated independently.

    Args:
        population: Current parents
        crossover_rate: Probability of crossover for a pair
        crossover_fn: Two-parent operator returning two children
        mutation_fn: One-parent operator returning one child
        rng: Random number generator

    Returns:
        Tuple of (offspring_genomes, operation_log) where operation_log holds
        "crossover" or "mutation" per pair
    """
    offspring: List[Genome] = []
    op_log: List[str] = []

    for a, b in pair_parents(len(population), rng):
        genome_a = population[a].genome
        genome_b = population[b].genome

        if rng.random() < crossover_rate:
            child_a, child_b = crossover_fn(genome_a, genome_b, rng)
            op_log.append("crossover")
        else:
            child_a = mutation_fn(genome_a, rng)
            child_b = mutation_fn(genome_b, rng)
            op_log.append("mutation")

        offspring.extend([child_a, child_b])

    return offspring, op_log


def truncation_select(
    pool: List[Individual],
    keep: int,
    rng: np.random.Generator
) -> List[Individual]:
    """
    Keep the lowest-scoring members of a pool.

    Exact ties are ordered by random keys rather than by position in the pool.

    Args:
        pool: Candidate individuals
        keep: Number of individuals to retain
        rng: Random number generator

    Returns:
        The retained individuals in rank order (best first)
    """
    scores = np.array([ind.score for ind in pool], dtype=float)
    tie_break = rng.random(len(pool))
    # lexsort uses the last key as primary
    order = np.lexsort((tie_break, scores))
    return [pool[k] for k in order[:keep]]


def run_generation(
    population: Population,
    fitness: FitnessFn,
    crossover_rate: float,
    crossover_fn: CrossoverFn,
    mutation_fn: MutationFn,
    rng: np.random.Generator,
    generation: int = 0,
    n_workers: int = 1
) -> Tuple[Population, GenerationRecord]:
    """
    Advance the population by one generation.

    Algorithm:
        1. Shuffle parents into population_size / 2 pairs
        2. Crossover (probability crossover_rate) or mutate each pair
        3. Score all offspring
        4. Rank parents + offspring by score with random tie-breaking
           and keep the best population_size

    Args:
        population: Current parents (even size)
        fitness: Objective function (minimized)
        crossover_rate: Probability of crossover for a pair
        crossover_fn: Two-parent operator returning two children
        mutation_fn: One-parent operator returning one child
        rng: Random number generator
        generation: Generation number stored in the record
        n_workers: Threads used for offspring scoring

    Returns:
        Tuple of (next_population, generation_record)
    """
    offspring_genomes, _ = make_offspring(
        population, crossover_rate, crossover_fn, mutation_fn, rng
    )
    offspring = evaluate_genomes(fitness, offspring_genomes, n_workers)

    pool = list(population.individuals) + offspring
    retained = truncation_select(pool, len(population), rng)

    record = GenerationRecord(
        generation=generation,
        scores=np.array([ind.score for ind in retained], dtype=float),
        elite=retained[0].copy()
    )

    return Population(retained), record
