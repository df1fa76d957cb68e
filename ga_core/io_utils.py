"""
I/O utilities for the GA engine.

Handles city CSV parsing, score history and convergence export,
best-solution YAML sidecars, and output folder management.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import yaml


def load_cities_csv(csv_path: Union[str, Path]) -> np.ndarray:
    """
    Load city coordinates from a CSV file.

    CSV format:
        name,x,y
        depot,0.0,0.0
        city_1,0.5,-1.05
        ...

    The name column is optional; rows keep file order and city i is row i.

    Args:
        csv_path: Path to CSV file

    Returns:
        Float array of shape (n, 2)

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid or has no rows
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    coords = []
    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        # Validate header
        if not reader.fieldnames or not all(col in reader.fieldnames for col in ['x', 'y']):
            raise ValueError(f"Invalid CSV format in {csv_path}. Expected columns: x,y")

        for row_number, row in enumerate(reader, start=1):
            try:
                coords.append((float(row['x']), float(row['y'])))
            except (TypeError, ValueError):
                raise ValueError(f"Invalid x,y coordinates in row {row_number} of {csv_path}")

    if not coords:
        raise ValueError(f"CSV file is empty (no cities): {csv_path}")

    return np.array(coords, dtype=float)


def _prepare_output(output_path: Union[str, Path], overwrite: bool) -> Path:
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    # Create parent directory if needed
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def save_score_history(
    score_history: np.ndarray,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save the full score history matrix to CSV.

    One row per generation; columns are the retained scores in rank order.

    Args:
        score_history: Array of shape (num_generations, population_size)
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)
    population_size = score_history.shape[1]

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['generation'] + [f"rank_{k + 1:03d}" for k in range(population_size)])

        for g, row in enumerate(score_history, start=1):
            writer.writerow([g] + [repr(float(v)) for v in row])

    return output_path


def load_score_history(csv_path: Union[str, Path]) -> np.ndarray:
    """
    Load a score history matrix written by save_score_history.

    Raises:
        FileNotFoundError: If CSV file doesn't exist
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    with open(csv_path, 'r', newline='') as f:
        reader = csv.reader(f)
        next(reader)
        rows = [[float(v) for v in row[1:]] for row in reader]

    return np.array(rows, dtype=float)


def save_convergence_summary(
    rows: List[Dict[str, Any]],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save per-generation min/mean/max rows to CSV.

    Args:
        rows: Output of convergence_summary()
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=['generation', 'min', 'mean', 'max'])
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    return output_path


def save_best_solution(
    solution: Dict[str, Any],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save the best solution and run metadata to a YAML file.

    Args:
        solution: Plain-Python dictionary (e.g. result.to_dict())
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved YAML file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)

    payload = dict(solution)
    payload.setdefault('saved_at', datetime.now().isoformat())

    with open(output_path, 'w') as f:
        yaml.dump(payload, f, default_flow_style=False, sort_keys=False)

    return output_path


def create_output_folder(root: Union[str, Path], overwrite: bool = False) -> Path:
    """
    Create the output folder for a run.

    Args:
        root: Output directory
        overwrite: Allow reuse of an existing directory

    Returns:
        Path to the output folder

    Raises:
        FileExistsError: If folder exists and overwrite=False
    """
    root = Path(root)

    if root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    root.mkdir(parents=True, exist_ok=overwrite)
    return root


def load_yaml(path: Union[str, Path]) -> Optional[dict]:
    """
    Load a YAML file.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, 'r') as f:
        return yaml.safe_load(f)
