"""
Optimization drivers for the GA engine.

Initializes a population, runs the generation step a fixed number of
times, and collects the score history and final elite.
"""

from functools import partial
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .crossover import (
    CROSSOVER_OPERATORS,
    CrossoverType,
    parse_crossover_type,
    uniform_swap_crossover,
)
from .data_models import (
    ContinuousResult,
    GenerationRecord,
    PermutationResult,
    Population,
    effective_population_size,
)
from .generation import CrossoverFn, FitnessFn, MutationFn, evaluate_genomes, run_generation
from .mutation import MUTATION_OPERATORS, MutationType, bounded_perturbation, parse_mutation_type
from .validation import (
    InvalidConfigError,
    validate_bounds,
    validate_common,
    validate_distance_matrix,
    validate_step_ratio,
)


def tour_length(tour: np.ndarray, distance_matrix: np.ndarray) -> float:
    """
    Length of the closed tour visiting cities in the given order.

    Args:
        tour: Permutation of city indices
        distance_matrix: Pairwise distance matrix

    Returns:
        Sum of consecutive distances including the return leg
    """
    return float(distance_matrix[tour, np.roll(tour, -1)].sum())


def initialize_continuous(
    population_size: int,
    bounds: np.ndarray,
    rng: np.random.Generator
) -> List[np.ndarray]:
    """Draw genomes uniformly and independently within each dimension's bounds."""
    lo, hi = bounds[:, 0], bounds[:, 1]
    return [rng.uniform(lo, hi) for _ in range(population_size)]


def initialize_permutations(
    population_size: int,
    n: int,
    rng: np.random.Generator
) -> List[np.ndarray]:
    """Draw independent uniformly random permutations of {0, ..., n-1}."""
    return [rng.permutation(n) for _ in range(population_size)]


def _perturb(genome: np.ndarray, rng: np.random.Generator,
             bounds: np.ndarray, step_ratio: float) -> np.ndarray:
    return bounded_perturbation(genome, bounds, step_ratio, rng)


def _check_workers(n_workers: int) -> None:
    if n_workers < 1:
        raise InvalidConfigError(f"n_workers must be at least 1, got: {n_workers}")


def _evolve(
    population: Population,
    fitness: FitnessFn,
    crossover_rate: float,
    num_generations: int,
    crossover_fn: CrossoverFn,
    mutation_fn: MutationFn,
    rng: np.random.Generator,
    n_workers: int,
    verbose: bool
) -> Tuple[Population, np.ndarray, List[GenerationRecord]]:
    """Run the generation step num_generations times."""
    history = np.empty((num_generations, len(population)), dtype=float)
    records: List[GenerationRecord] = []

    for g in range(num_generations):
        population, record = run_generation(
            population, fitness, crossover_rate, crossover_fn, mutation_fn,
            rng, generation=g + 1, n_workers=n_workers
        )
        history[g] = record.scores
        records.append(record)

        if verbose and ((g + 1) % 10 == 0 or g == num_generations - 1):
            print(f"  Progress: {g + 1}/{num_generations} generations "
                  f"(best={record.best:.6g}, mean={record.mean:.6g})")

    return population, history, records


def _print_header(title: str, population_size: int, crossover_rate: float,
                  num_generations: int, rng_seed: int) -> None:
    print("=" * 70)
    print(title)
    print("=" * 70)
    print(f"Population size: {population_size}")
    print(f"Crossover rate: {crossover_rate}")
    print(f"Generations: {num_generations}")
    print(f"Random seed: {rng_seed}")
    print()


def optimize_continuous(
    n: int,
    fitness: FitnessFn,
    population_size: int,
    crossover_rate: float,
    num_generations: int,
    bounds: Sequence[Sequence[float]],
    mutation_step_ratio: float,
    rng_seed: int,
    n_workers: int = 1,
    verbose: bool = False
) -> ContinuousResult:
    """
    Minimize a function of a bounded real vector.

    Offspring come from uniform-swap crossover or from bounded perturbation
    of a single coordinate. Selection is truncation over parents + offspring.

    Args:
        n: Number of dimensions
        fitness: Objective function taking an (n,) float array
        population_size: Population size (rounded up to even)
        crossover_rate: Probability of crossover vs. mutation per pair
        num_generations: Number of generation steps
        bounds: (lo, hi) per dimension
        mutation_step_ratio: Fraction of each dimension's range used as max step
        rng_seed: Seed fixing the full random draw sequence
        n_workers: Threads used for fitness evaluation
        verbose: Print progress and summary

    Returns:
        ContinuousResult with the final elite, population and score history

    Raises:
        InvalidConfigError: If any parameter is invalid
        FitnessEvaluationError: If the objective fails on any genome
    """
    validate_common(population_size, crossover_rate, num_generations, rng_seed)
    bounds_array = validate_bounds(n, bounds)
    validate_step_ratio(mutation_step_ratio)
    _check_workers(n_workers)

    np_size = effective_population_size(population_size)
    rng = np.random.default_rng(rng_seed)

    if verbose:
        _print_header("CONTINUOUS OPTIMIZATION", np_size, crossover_rate, num_generations, rng_seed)
        print(f"Dimensions: {n}")
        print(f"Mutation step ratio: {mutation_step_ratio}")
        print()

    population = Population(
        evaluate_genomes(fitness, initialize_continuous(np_size, bounds_array, rng), n_workers)
    )
    mutation_fn = partial(
        _perturb, bounds=bounds_array, step_ratio=mutation_step_ratio
    )

    population, history, records = _evolve(
        population, fitness, crossover_rate, num_generations,
        uniform_swap_crossover, mutation_fn, rng, n_workers, verbose
    )
    elite = records[-1].elite

    if verbose:
        print()
        print("=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Best score: {elite.score:.6g}")
        print(f"Best genome: {np.array2string(elite.genome, precision=6)}")

    return ContinuousResult(
        best_genome=elite.genome,
        best_score=elite.score,
        final_population=population,
        score_history=history,
        records=records
    )


def optimize_permutation(
    n: int,
    distance_matrix,
    population_size: int,
    crossover_rate: float,
    num_generations: int,
    crossover_op: Union[CrossoverType, str],
    mutation_op: Union[MutationType, str],
    rng_seed: int,
    fitness: Optional[Callable[[np.ndarray], float]] = None,
    n_workers: int = 1,
    verbose: bool = False
) -> PermutationResult:
    """
    Minimize a function of a permutation of {0, ..., n-1}.

    By default the objective is the closed-tour length over distance_matrix
    (travelling salesman).

    Args:
        n: Number of cities / permutation length
        distance_matrix: Symmetric non-negative n x n matrix
        population_size: Population size (rounded up to even)
        crossover_rate: Probability of crossover vs. mutation per pair
        num_generations: Number of generation steps
        crossover_op: PMX, OX or CX (enum or name)
        mutation_op: POINT_SWAP or INVERSION (enum or name)
        rng_seed: Seed fixing the full random draw sequence
        fitness: Optional objective replacing the tour length
        n_workers: Threads used for fitness evaluation
        verbose: Print progress and summary

    Returns:
        PermutationResult with the final elite tour, population and score history

    Raises:
        InvalidConfigError: If any parameter is invalid
        FitnessEvaluationError: If the objective fails on any genome
    """
    validate_common(population_size, crossover_rate, num_generations, rng_seed)
    d = validate_distance_matrix(n, distance_matrix)
    crossover_type = parse_crossover_type(crossover_op)
    mutation_type = parse_mutation_type(mutation_op)
    _check_workers(n_workers)

    if fitness is None:
        fitness = partial(tour_length, distance_matrix=d)

    np_size = effective_population_size(population_size)
    rng = np.random.default_rng(rng_seed)

    if verbose:
        _print_header("PERMUTATION OPTIMIZATION", np_size, crossover_rate, num_generations, rng_seed)
        print(f"Cities: {n}")
        print(f"Crossover: {crossover_type.value}")
        print(f"Mutation: {mutation_type.value}")
        print()

    population = Population(
        evaluate_genomes(fitness, initialize_permutations(np_size, n, rng), n_workers)
    )

    population, history, records = _evolve(
        population, fitness, crossover_rate, num_generations,
        CROSSOVER_OPERATORS[crossover_type], MUTATION_OPERATORS[mutation_type],
        rng, n_workers, verbose
    )
    elite = records[-1].elite

    if verbose:
        print()
        print("=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Best length: {elite.score:.6g}")
        print(f"Best tour: {elite.genome.tolist()}")

    return PermutationResult(
        best_tour=elite.genome,
        best_length=elite.score,
        final_population=population,
        score_history=history,
        records=records
    )
