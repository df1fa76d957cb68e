"""
Crossover operators for the GA engine.

Implements uniform-swap crossover for real vectors and the three
permutation-preserving recombinations: partially-mapped (PMX),
order (OX) and cycle (CX) crossover.
"""

from enum import Enum
from itertools import chain
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from .validation import InvalidConfigError


class CrossoverType(Enum):
    """Permutation crossover operators."""
    PMX = "pmx"
    OX = "ox"
    CX = "cx"


def draw_cut_points(n: int, rng: np.random.Generator) -> Tuple[int, int]:
    """
    Draw two distinct cut indices uniformly from {0, ..., n-1}.

    Args:
        n: Genome length (must be >= 2)
        rng: Random number generator

    Returns:
        Sorted pair (i, j) with i < j
    """
    i, j = sorted(int(k) for k in rng.choice(n, size=2, replace=False))
    return i, j


def _resolve_cut_points(
    n: int,
    rng: Optional[np.random.Generator],
    cut_points: Optional[Tuple[int, int]]
) -> Tuple[int, int]:
    if cut_points is None:
        return draw_cut_points(n, rng)

    i, j = int(cut_points[0]), int(cut_points[1])
    if not 0 <= i < j <= n - 1:
        raise ValueError(f"Cut points must satisfy 0 <= i < j <= {n - 1}, got: ({i}, {j})")
    return i, j


def _is_degenerate(n: int, i: int, j: int) -> bool:
    # A cut spanning the whole genome passes the parents through unchanged.
    return i == 0 and j == n - 1


def _pmx_child(donor: np.ndarray, receiver: np.ndarray, i: int, j: int) -> np.ndarray:
    """Segment [i..j] from donor, remaining positions from receiver."""
    n = len(donor)
    child = receiver.copy()
    child[i:j + 1] = donor[i:j + 1]

    segment_position = {int(donor[k]): k for k in range(i, j + 1)}

    for k in chain(range(i), range(j + 1, n)):
        value = int(receiver[k])
        # Follow the mapping chain until the value no longer clashes
        while value in segment_position:
            value = int(receiver[segment_position[value]])
        child[k] = value

    return child


def pmx_crossover(
    parent_a: np.ndarray,
    parent_b: np.ndarray,
    rng: Optional[np.random.Generator] = None,
    cut_points: Optional[Tuple[int, int]] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Partially-mapped crossover.

    Child A receives parent B's segment [i..j]; every other position takes
    parent A's value, remapped through the segment correspondence while it
    collides with a value already copied in. Child B is built symmetrically.

    Args:
        parent_a: First parent permutation
        parent_b: Second parent permutation
        rng: Random number generator (used only when cut_points is None)
        cut_points: Optional explicit (i, j) cut indices

    Returns:
        Tuple of (child_a, child_b)
    """
    n = len(parent_a)
    i, j = _resolve_cut_points(n, rng, cut_points)
    if _is_degenerate(n, i, j):
        return parent_a.copy(), parent_b.copy()

    return _pmx_child(parent_b, parent_a, i, j), _pmx_child(parent_a, parent_b, i, j)


def _ox_child(keeper: np.ndarray, filler: np.ndarray, i: int, j: int) -> np.ndarray:
    """Segment [i..j] from keeper, remaining slots in filler's order after j."""
    segment = keeper[i:j + 1]
    rotated = np.roll(filler, -(j + 1))
    fill = rotated[~np.isin(rotated, segment)]
    return np.roll(np.concatenate([segment, fill]), i)


def order_crossover(
    parent_a: np.ndarray,
    parent_b: np.ndarray,
    rng: Optional[np.random.Generator] = None,
    cut_points: Optional[Tuple[int, int]] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Order crossover (OX).

    Child A keeps parent A's segment [i..j] in place. The remaining slots,
    starting just after j and wrapping around, are filled with parent B's
    values in the order they appear in parent B from position j+1 onwards,
    skipping values already in the segment. Child B mirrors this.

    Args:
        parent_a: First parent permutation
        parent_b: Second parent permutation
        rng: Random number generator (used only when cut_points is None)
        cut_points: Optional explicit (i, j) cut indices

    Returns:
        Tuple of (child_a, child_b)
    """
    n = len(parent_a)
    i, j = _resolve_cut_points(n, rng, cut_points)
    if _is_degenerate(n, i, j):
        return parent_a.copy(), parent_b.copy()

    return _ox_child(parent_a, parent_b, i, j), _ox_child(parent_b, parent_a, i, j)


def cycle_mask(parent_a: np.ndarray, parent_b: np.ndarray) -> np.ndarray:
    """
    Positions on the cycle that starts at position 0.

    Args:
        parent_a: First parent permutation
        parent_b: Second parent permutation over the same labels

    Returns:
        Boolean array, True where the position belongs to the cycle
    """
    position_in_a = {value: k for k, value in enumerate(parent_a.tolist())}
    labels_b = parent_b.tolist()

    on_cycle = np.zeros(len(parent_a), dtype=bool)
    index = 0
    while not on_cycle[index]:
        on_cycle[index] = True
        index = position_in_a[labels_b[index]]

    return on_cycle


def cycle_crossover(
    parent_a: np.ndarray,
    parent_b: np.ndarray,
    rng: Optional[np.random.Generator] = None,
    cut_points: Optional[Tuple[int, int]] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Cycle crossover (CX).

    Child A takes parent A's values on the cycle through position 0 and
    parent B's values elsewhere; child B is the complement. Cut points are
    drawn like the other operators so the whole-genome cut stays a
    pass-through, but they do not shape the cycle.

    Args:
        parent_a: First parent permutation
        parent_b: Second parent permutation
        rng: Random number generator (used only when cut_points is None)
        cut_points: Optional explicit (i, j) cut indices

    Returns:
        Tuple of (child_a, child_b)
    """
    n = len(parent_a)
    i, j = _resolve_cut_points(n, rng, cut_points)
    if _is_degenerate(n, i, j):
        return parent_a.copy(), parent_b.copy()

    on_cycle = cycle_mask(parent_a, parent_b)
    child_a = np.where(on_cycle, parent_a, parent_b)
    child_b = np.where(on_cycle, parent_b, parent_a)
    return child_a, child_b


def uniform_swap_crossover(
    parent_a: np.ndarray,
    parent_b: np.ndarray,
    rng: np.random.Generator
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Exchange each coordinate between two real-vector parents with probability 1/2.

    Both children stay within bounds because every coordinate comes from
    one of the parents.

    Args:
        parent_a: First parent vector
        parent_b: Second parent vector
        rng: Random number generator

    Returns:
        Tuple of (child_a, child_b)
    """
    swap = rng.random(len(parent_a)) < 0.5
    child_a = np.where(swap, parent_b, parent_a)
    child_b = np.where(swap, parent_a, parent_b)
    return child_a, child_b


CROSSOVER_OPERATORS: Dict[CrossoverType, Callable] = {
    CrossoverType.PMX: pmx_crossover,
    CrossoverType.OX: order_crossover,
    CrossoverType.CX: cycle_crossover,
}


def parse_crossover_type(op: Union[CrossoverType, str]) -> CrossoverType:
    """
    Convert an operator name ("pmx", "ox", "cx") to a CrossoverType.

    Raises:
        InvalidConfigError: If the name is unknown
    """
    if isinstance(op, CrossoverType):
        return op
    try:
        return CrossoverType(str(op).lower())
    except ValueError:
        valid = ", ".join(t.value for t in CrossoverType)
        raise InvalidConfigError(f"Unknown crossover operator: '{op}'. Must be one of: {valid}")


def apply_crossover(
    op: Union[CrossoverType, str],
    parent_a: np.ndarray,
    parent_b: np.ndarray,
    rng: np.random.Generator
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Apply the selected permutation crossover operator.

    Args:
        op: Operator type or its name
        parent_a: First parent permutation
        parent_b: Second parent permutation
        rng: Random number generator

    Returns:
        Tuple of (child_a, child_b)
    """
    return CROSSOVER_OPERATORS[parse_crossover_type(op)](parent_a, parent_b, rng)


def is_permutation(genome: np.ndarray) -> bool:
    """Check that genome is a bijection on {0, ..., n-1}."""
    values = np.asarray(genome)
    n = len(values)
    return bool(np.array_equal(np.sort(values), np.arange(n)))
