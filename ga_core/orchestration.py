"""
Orchestration module for the GA engine.

Implements the continuous and permutation run workflows driven by a
YAML run configuration.
"""

from functools import partial
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np

from problems.objectives import distance_matrix, get_objective, nearest_neighbour_tour, tour_length

from .data_models import ContinuousResult, PermutationResult
from .engine import optimize_continuous, optimize_permutation
from .io_utils import (
    create_output_folder,
    load_cities_csv,
    save_best_solution,
    save_convergence_summary,
    save_score_history,
)

GA_DEFAULTS = {
    'population_size': 50,
    'crossover_rate': 0.7,
    'num_generations': 100,
    'mutation_step_ratio': 0.1,
    'crossover': 'pmx',
    'mutation': 'point_swap',
    'workers': 1,
}


def resolve_seed(run_config: Dict) -> int:
    """
    Get the run's random seed, generating and reporting one if absent.

    Args:
        run_config: Run configuration dict

    Returns:
        Integer seed
    """
    seed = run_config.get('random_seed')
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**31))
        print(f"Random seed: {seed} (generated; set 'random_seed' to reproduce)")
    else:
        seed = int(seed)
        print(f"Random seed: {seed}")
    return seed


def ga_settings(run_config: Dict) -> Dict[str, Any]:
    """Merge the run's 'ga' section over the defaults."""
    settings = dict(GA_DEFAULTS)
    settings.update(run_config.get('ga') or {})
    return settings


def load_cities(problem_config: Dict, base_dir: Optional[Path] = None) -> np.ndarray:
    """
    Get city coordinates from an inline list or a CSV file.

    Args:
        problem_config: The run's 'problem' section
        base_dir: Directory used to resolve a relative cities_csv path

    Returns:
        Float array of shape (n, 2)
    """
    if 'cities' in problem_config:
        return np.asarray(problem_config['cities'], dtype=float)

    csv_path = Path(problem_config['cities_csv'])
    if base_dir is not None and not csv_path.is_absolute() and not csv_path.exists():
        csv_path = base_dir / csv_path
    return load_cities_csv(csv_path)


def _write_outputs(
    run_config: Dict,
    result: Union[ContinuousResult, PermutationResult],
    solution: Dict[str, Any]
) -> Optional[Path]:
    output_config = run_config.get('output')
    if not output_config:
        return None

    overwrite = output_config.get('overwrite', False)
    output_root = create_output_folder(output_config['root'], overwrite=overwrite)
    print(f"Output directory: {output_root}")

    save_score_history(result.score_history, output_root / 'score_history.csv', overwrite=overwrite)
    save_convergence_summary(result.convergence_summary(), output_root / 'convergence.csv',
                             overwrite=overwrite)
    save_best_solution(solution, output_root / 'best_solution.yaml', overwrite=overwrite)

    print(f"Files created: {len(list(output_root.iterdir()))}")
    return output_root


def run_continuous_mode(run_config: Dict) -> ContinuousResult:
    """
    Minimize a registered benchmark objective over a bounded box.

    Args:
        run_config: Run configuration dict from YAML

    Algorithm:
        1. Resolve seed and GA settings
        2. Look up problem.objective (with optional problem.objective_args)
        3. Run optimize_continuous over problem.bounds
        4. Write score history, convergence summary and best solution
           to output.root if configured

    Returns:
        ContinuousResult of the run
    """
    print("=" * 70)
    print("CONTINUOUS MODE")
    print("=" * 70)

    seed = resolve_seed(run_config)
    settings = ga_settings(run_config)
    problem = run_config['problem']

    objective = get_objective(problem['objective'])
    objective_args = problem.get('objective_args') or {}
    if objective_args:
        objective = partial(objective, **objective_args)
    print(f"Objective: {problem['objective']}")

    bounds = problem['bounds']
    result = optimize_continuous(
        n=len(bounds),
        fitness=objective,
        population_size=settings['population_size'],
        crossover_rate=settings['crossover_rate'],
        num_generations=settings['num_generations'],
        bounds=bounds,
        mutation_step_ratio=settings['mutation_step_ratio'],
        rng_seed=seed,
        n_workers=settings['workers'],
        verbose=True
    )

    solution = result.to_dict()
    solution.update({'mode': 'continuous', 'objective': problem['objective'], 'random_seed': seed})
    _write_outputs(run_config, result, solution)

    return result


def run_permutation_mode(run_config: Dict, base_dir: Optional[Path] = None) -> PermutationResult:
    """
    Search for a short closed tour through a set of cities.

    Args:
        run_config: Run configuration dict from YAML
        base_dir: Directory used to resolve a relative cities_csv path

    Algorithm:
        1. Resolve seed and GA settings
        2. Load cities and build the Euclidean distance matrix
        3. Run optimize_permutation with the configured operators
        4. Report the greedy nearest-neighbour baseline for comparison
        5. Write outputs to output.root if configured

    Returns:
        PermutationResult of the run
    """
    print("=" * 70)
    print("PERMUTATION MODE")
    print("=" * 70)

    seed = resolve_seed(run_config)
    settings = ga_settings(run_config)

    coords = load_cities(run_config['problem'], base_dir)
    d = distance_matrix(coords)
    print(f"Loaded {len(coords)} cities")

    result = optimize_permutation(
        n=len(coords),
        distance_matrix=d,
        population_size=settings['population_size'],
        crossover_rate=settings['crossover_rate'],
        num_generations=settings['num_generations'],
        crossover_op=settings['crossover'],
        mutation_op=settings['mutation'],
        rng_seed=seed,
        n_workers=settings['workers'],
        verbose=True
    )

    baseline = tour_length(nearest_neighbour_tour(d), d)
    print(f"Nearest-neighbour baseline: {baseline:.6g}")
    print(f"Improvement over baseline: {baseline - result.best_length:.6g}")

    solution = result.to_dict()
    solution.update({
        'mode': 'permutation',
        'crossover': str(settings['crossover']),
        'mutation': str(settings['mutation']),
        'baseline_length': float(baseline),
        'random_seed': seed,
    })
    _write_outputs(run_config, result, solution)

    return result
