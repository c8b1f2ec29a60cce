"""
Solution decoding from the x-vector to a table of labels.

Given:
  - x: solved 0/1 vector, length model.num_variables
  - the PuzzleModel that produced it

Returns:
  - per-pair grids: {(row_category, col_category): n x n int array}
  - SolutionTable: one row per anchor entity, one column per category

Decoding relies on the permutation invariant: each row and column of every
grid holds exactly one 1. A violation means the constraint system is broken
and raises InconsistentSolutionError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from logicgrid.core.errors import InconsistentSolutionError
from logicgrid.puzzle.model import PuzzleModel


PairKey = Tuple[str, str]


@dataclass(frozen=True)
class SolutionTable:
    """
    Decoded solution: one row per anchor entity.

    Attributes:
        columns: Category names, anchor first, then registration order
        rows: One tuple of labels per anchor index, in anchor label order

    Example:
        >>> table.row_for("Amanda")
        ('Amanda', '2013', 'London')
    """
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]

    @property
    def anchor(self) -> str:
        return self.columns[0]

    def row_for(self, anchor_label: str) -> Tuple[str, ...]:
        for row in self.rows:
            if row[0] == str(anchor_label):
                return row
        raise KeyError(f"No row for {self.anchor} '{anchor_label}'")

    def as_dicts(self) -> List[Dict[str, str]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def format(self) -> str:
        """Aligned plain-text rendering."""
        widths = [
            max(len(col), *(len(row[c]) for row in self.rows)) if self.rows else len(col)
            for c, col in enumerate(self.columns)
        ]
        lines = [
            "  ".join(col.ljust(w) for col, w in zip(self.columns, widths)),
            "  ".join("-" * w for w in widths),
        ]
        for row in self.rows:
            lines.append("  ".join(val.ljust(w) for val, w in zip(row, widths)).rstrip())
        return "\n".join(lines)


def _validate_assignment(model: PuzzleModel, x: np.ndarray) -> np.ndarray:
    x = np.asarray(x)
    if x.ndim != 1:
        raise ValueError(f"x must be 1D, got ndim={x.ndim}")
    if x.size < model.num_grid_variables:
        raise ValueError(
            f"x length {x.size} is shorter than the {model.num_grid_variables} grid variables"
        )
    return x


def assignment_to_grids(model: PuzzleModel, x: np.ndarray) -> Dict[PairKey, np.ndarray]:
    """
    Reshape the grid block of x into one n x n array per category pair.

    Keys are (row_category, col_category) in slot order, rows indexed by the
    category registered first.

    Example:
        >>> grids = assignment_to_grids(model, result.assignment)
        >>> grids[("people", "years")].sum(axis=1)
        array([1, 1, 1, 1])
    """
    x = _validate_assignment(model, x)
    n = model.n
    block = x[: model.num_grid_variables].reshape(-1, n, n).astype(int)

    grids: Dict[PairKey, np.ndarray] = {}
    for slot, (row_cat, col_cat) in enumerate(model.pairs()):
        grids[(row_cat.name, col_cat.name)] = block[slot]
    return grids


def grid_between(grids: Dict[PairKey, np.ndarray], row_category: str,
                 col_category: str) -> np.ndarray:
    """The grid oriented rows=row_category, cols=col_category."""
    if (row_category, col_category) in grids:
        return grids[(row_category, col_category)]
    if (col_category, row_category) in grids:
        return grids[(col_category, row_category)].T
    raise KeyError(f"No grid between '{row_category}' and '{col_category}'")


def check_permutation(grid: np.ndarray, key: PairKey) -> None:
    """
    Raises:
        InconsistentSolutionError: If a row or column does not hold exactly one 1
    """
    row_sums = grid.sum(axis=1)
    col_sums = grid.sum(axis=0)
    if np.all(row_sums == 1) and np.all(col_sums == 1):
        return

    bad_rows = np.where(row_sums != 1)[0].tolist()
    bad_cols = np.where(col_sums != 1)[0].tolist()
    raise InconsistentSolutionError(
        f"Grid {key[0]} x {key[1]} is not a permutation: "
        f"rows {bad_rows} sum to {row_sums[bad_rows].tolist()}, "
        f"cols {bad_cols} sum to {col_sums[bad_cols].tolist()}"
    )


def extract_table(
    model: PuzzleModel,
    x: np.ndarray,
    anchor: Optional[str] = None,
) -> SolutionTable:
    """
    Decode a solved x vector into a table of labels.

    For each anchor index i, the matched entity of every other category C is
    the unique j with grid(anchor, C)[i, j] == 1.

    Args:
        model: The PuzzleModel that was solved
        x: Solved 0/1 vector (SolveResult.assignment)
        anchor: Category whose entities index the rows (default: first
                registered category)

    Returns:
        SolutionTable with the anchor column first

    Raises:
        InconsistentSolutionError: If any grid is not a permutation matrix
        UnknownCategoryError: If anchor is not a registered category
    """
    grids = assignment_to_grids(model, x)
    for key, grid in grids.items():
        check_permutation(grid, key)

    anchor_name = anchor if anchor is not None else model.categories[0].name
    anchor_cat = model.category(anchor_name)
    others = [c for c in model.categories if c.name != anchor_name]

    # argmax is exact here: every row is one-hot after check_permutation
    matched = {
        other.name: np.argmax(grid_between(grids, anchor_name, other.name), axis=1)
        for other in others
    }

    rows = []
    for i, label in enumerate(anchor_cat.labels):
        row = [label]
        for other in others:
            row.append(other.labels[int(matched[other.name][i])])
        rows.append(tuple(row))

    columns = (anchor_name,) + tuple(c.name for c in others)
    return SolutionTable(columns=columns, rows=tuple(rows))
