"""
CLI module for the GA engine.

Handles run configuration loading, validation, and mode dispatching.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .crossover import parse_crossover_type
from .mutation import parse_mutation_type
from .validation import InvalidConfigError


class ConfigValidationError(InvalidConfigError):
    """Raised when run configuration is invalid."""
    pass


VALID_MODES = ['continuous', 'permutation']


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration file must contain a mapping")

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Numeric ranges (population size, bounds, distance matrix) are checked
    again by the optimizer before the first generation.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    # Check mode field
    if 'mode' not in config:
        raise ConfigValidationError("Missing required field: 'mode'")

    mode = config['mode']
    if mode not in VALID_MODES:
        raise ConfigValidationError(
            f"Invalid mode: '{mode}'. Must be 'continuous' or 'permutation'"
        )

    if 'problem' not in config:
        raise ConfigValidationError("Missing required field: 'problem'")
    if not isinstance(config['problem'], dict):
        raise ConfigValidationError("'problem' must be a dictionary")

    if 'ga' in config and not isinstance(config['ga'], dict):
        raise ConfigValidationError("'ga' must be a dictionary")

    seed = config.get('random_seed')
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigValidationError(f"'random_seed' must be an integer, got: {seed}")

    _validate_ga_section(config.get('ga') or {})

    # Validate output section (optional)
    if 'output' in config:
        if not isinstance(config['output'], dict):
            raise ConfigValidationError("'output' must be a dictionary")
        if 'root' not in config['output']:
            raise ConfigValidationError("Missing required field: 'output.root'")

    # Mode-specific validation
    if mode == 'continuous':
        _validate_continuous_config(config)
    elif mode == 'permutation':
        _validate_permutation_config(config)


def _validate_ga_section(ga_config: Dict[str, Any]) -> None:
    """
    Validate types of the GA settings that are present.

    Args:
        ga_config: The 'ga' section

    Raises:
        ConfigValidationError: If a setting has the wrong type or range
    """
    for key in ['population_size', 'num_generations', 'workers']:
        if key in ga_config:
            value = ga_config[key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigValidationError(
                    f"'ga.{key}' must be a positive integer, got: {value}"
                )

    if 'crossover_rate' in ga_config:
        rate = ga_config['crossover_rate']
        if not isinstance(rate, (int, float)) or not 0.0 <= rate <= 1.0:
            raise ConfigValidationError(
                f"'ga.crossover_rate' must be a number in [0, 1], got: {rate}"
            )

    if 'mutation_step_ratio' in ga_config:
        ratio = ga_config['mutation_step_ratio']
        if not isinstance(ratio, (int, float)) or ratio <= 0:
            raise ConfigValidationError(
                f"'ga.mutation_step_ratio' must be a positive number, got: {ratio}"
            )


def _validate_continuous_config(config: Dict[str, Any]) -> None:
    """
    Validate continuous mode configuration.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    from problems.objectives import OBJECTIVES

    problem = config['problem']

    if 'objective' not in problem:
        raise ConfigValidationError("Continuous mode requires 'problem.objective' field")
    if str(problem['objective']).lower() not in OBJECTIVES:
        raise ConfigValidationError(
            f"Unknown objective: '{problem['objective']}'. "
            f"Available: {', '.join(sorted(OBJECTIVES))}"
        )

    if 'bounds' not in problem:
        raise ConfigValidationError("Continuous mode requires 'problem.bounds' field")

    bounds = problem['bounds']
    if not isinstance(bounds, list) or not bounds:
        raise ConfigValidationError("'problem.bounds' must be a non-empty list of [lo, hi] pairs")
    for i, pair in enumerate(bounds):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ConfigValidationError(f"'problem.bounds[{i}]' must be a [lo, hi] pair, got: {pair}")
        if pair[0] >= pair[1]:
            raise ConfigValidationError(
                f"'problem.bounds[{i}]' must satisfy lo < hi, got: {pair}"
            )

    if 'objective_args' in problem and not isinstance(problem['objective_args'], dict):
        raise ConfigValidationError("'problem.objective_args' must be a dictionary")


def _validate_permutation_config(config: Dict[str, Any]) -> None:
    """
    Validate permutation mode configuration.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    problem = config['problem']

    has_inline = 'cities' in problem
    has_csv = 'cities_csv' in problem

    if not has_inline and not has_csv:
        raise ConfigValidationError(
            "Permutation mode requires either 'problem.cities' or 'problem.cities_csv'"
        )

    if has_inline and has_csv:
        raise ConfigValidationError(
            "Permutation mode cannot have both 'cities' and 'cities_csv'. "
            "Please specify only one."
        )

    if has_inline:
        cities = problem['cities']
        if not isinstance(cities, list) or len(cities) < 2:
            raise ConfigValidationError("'problem.cities' must list at least two [x, y] points")
        for i, point in enumerate(cities):
            if not isinstance(point, (list, tuple)) or len(point) != 2:
                raise ConfigValidationError(f"'problem.cities[{i}]' must be an [x, y] point, got: {point}")

    ga_config = config.get('ga') or {}
    try:
        if 'crossover' in ga_config:
            parse_crossover_type(ga_config['crossover'])
        if 'mutation' in ga_config:
            parse_mutation_type(ga_config['mutation'])
    except InvalidConfigError as e:
        raise ConfigValidationError(str(e))


def run_from_config(config_path: str, overrides: Optional[Dict[str, Any]] = None):
    """
    Load run configuration and execute appropriate mode.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file
        overrides: Top-level keys replacing those loaded from the file

    Returns:
        The run's ContinuousResult or PermutationResult

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        Various exceptions from mode implementations
    """
    # Load and validate config
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)
    if overrides:
        config.update(overrides)

    print("Validating configuration...")
    validate_run_config(config)

    mode = config['mode']
    print(f"Mode: {mode}\n")

    # Dispatch to appropriate mode
    if mode == 'continuous':
        from .orchestration import run_continuous_mode
        result = run_continuous_mode(config)
    elif mode == 'permutation':
        from .orchestration import run_permutation_mode
        result = run_permutation_mode(config, base_dir=Path(config_path).parent)
    else:
        # Should never reach here due to validation
        raise ConfigValidationError(f"Invalid mode: {mode}")

    print("\nRun completed successfully!")
    return result
