"""
x-vector indexing helpers for the constraint system.

This module provides canonical mappings between:
  - Category pair (a, b), a < b  <->  pair slot s (0..P-1), P = p*(p-1)/2
  - Grid cell (s, i, j)          <->  x-vector index x_idx

Conventions:
  - Categories are identified by their registration position 0..p-1
  - Pairs are ordered lexicographically: (0,1), (0,2), ..., (0,p-1), (1,2), ...
  - Each pair slot owns one n x n block of the x vector, rows indexed by the
    lower category, columns by the higher one
  - x-vector layout: x_idx = s * n*n + i * n + j
  - All indices are 0-based (Python convention)

Any auxiliary variables (see PuzzleModel.build_consistency_constraints) live after
the last grid block, at x_idx >= P * n*n.

This is pure indexing math with no dependencies on constraints or solver.
"""

from typing import List, Tuple


def num_pairs(p: int) -> int:
    """
    Number of unordered category pairs.

    Example:
        >>> num_pairs(4)
        6
    """
    return p * (p - 1) // 2


def canonical_pairs(p: int) -> List[Tuple[int, int]]:
    """
    All unordered pairs (a, b) with a < b, in slot order.

    Example:
        >>> canonical_pairs(3)
        [(0, 1), (0, 2), (1, 2)]
    """
    return [(a, b) for a in range(p) for b in range(a + 1, p)]


def pair_slot(a: int, b: int, p: int) -> int:
    """
    Slot of the unordered pair {a, b} in canonical order.

    Args:
        a, b: category positions, a != b (order does not matter)
        p: number of categories

    Returns:
        s such that canonical_pairs(p)[s] == (min(a, b), max(a, b))

    Example:
        >>> pair_slot(1, 2, 4)
        3
        >>> pair_slot(2, 1, 4)
        3
    """
    if a == b:
        raise ValueError(f"A pair needs two distinct categories, got {a} twice")
    lo, hi = (a, b) if a < b else (b, a)
    # rows 0..lo-1 contribute (p-1) + (p-2) + ... + (p-lo) slots
    return lo * p - lo * (lo + 1) // 2 + (hi - lo - 1)


def cell_index(slot: int, i: int, j: int, n: int) -> int:
    """
    x-vector index of cell (i, j) in the grid of pair slot `slot`.

    Example:
        >>> # n=4, slot 1, cell (2, 3)
        >>> cell_index(1, 2, 3, 4)
        27
    """
    return slot * n * n + i * n + j


def cell_index_to_sij(x_idx: int, n: int) -> Tuple[int, int, int]:
    """
    Inverse of cell_index for grid variables.

    Example:
        >>> cell_index_to_sij(27, 4)
        (1, 2, 3)
    """
    slot, rest = divmod(x_idx, n * n)
    i, j = divmod(rest, n)
    return (slot, i, j)


def num_grid_variables(p: int, n: int) -> int:
    """Total number of grid cells over all pair slots."""
    return num_pairs(p) * n * n
