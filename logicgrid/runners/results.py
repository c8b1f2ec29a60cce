"""
Result and diagnostics structures for the logic-grid solver.

This module defines SolveDiagnostics, the single structured object that
captures everything about a solve attempt, especially failures, plus the
independent checks run on every returned assignment.

Key components:
  - SolveDiagnostics: complete solve attempt record (status, sizes, violations)
  - check_bijection: every pair grid is a permutation matrix
  - check_transitivity: matchings agree across every category triple
  - check_constraints: every collected linear constraint holds
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import permutations
from typing import Dict, List, Literal, Optional

import numpy as np

from logicgrid.constraints.builder import LinearConstraint
from logicgrid.puzzle.model import PuzzleModel
from logicgrid.solver.decoding import assignment_to_grids, grid_between


# Status type for solve attempts
KernelStatus = Literal["ok", "infeasible", "not_unique", "error"]


@dataclass
class SolveDiagnostics:
    """
    Complete diagnostics for a single solve attempt.

    Attributes:
        puzzle_name: Name of the puzzle definition
        status: Outcome of the pipeline:
            - "ok": a solution was found and decoded
            - "infeasible": the clues admit no solution
            - "not_unique": a solution was found but uniqueness was requested
                            and a second one exists
            - "error": solver error (see error_message)
        solver_status: Status from the solver adapter ("OPTIMAL", ...)
        backend: PuLP backend name
        num_categories, category_size: p and n
        num_variables, num_constraints: model size
        constraint_counts: constraints per family tag ("row", "col",
                           "transitivity", "clue")
        num_clues: number of clues applied
        unique: True/False if uniqueness was checked, None otherwise
        violations: Messages from check_* on the returned assignment
                    (empty for a correct model)
        error_message: Optional error text for status="error"
    """
    puzzle_name: str
    status: KernelStatus
    solver_status: str
    backend: str

    num_categories: int
    category_size: int
    num_variables: int
    num_constraints: int
    num_clues: int

    constraint_counts: Dict[str, int] = field(default_factory=dict)
    unique: Optional[bool] = None
    violations: List[str] = field(default_factory=list)

    # Debug / error information
    error_message: Optional[str] = None

    def summary(self) -> str:
        text = (
            f"{self.puzzle_name}: {self.status} [{self.solver_status} via {self.backend}] "
            f"p={self.num_categories} n={self.category_size} "
            f"vars={self.num_variables} cons={self.num_constraints} clues={self.num_clues}"
        )
        if self.unique is not None:
            text += f" unique={self.unique}"
        if self.error_message:
            text += f" error={self.error_message}"
        return text


def check_bijection(model: PuzzleModel, x: np.ndarray) -> List[str]:
    """
    Every grid has exactly one 1 per row and per column.

    Returns:
        List of violation messages (empty if all grids are permutations)
    """
    violations = []
    for (a, b), grid in assignment_to_grids(model, x).items():
        for i, s in enumerate(grid.sum(axis=1)):
            if s != 1:
                violations.append(f"{a} x {b}: row {i} sums to {int(s)}")
        for j, s in enumerate(grid.sum(axis=0)):
            if s != 1:
                violations.append(f"{a} x {b}: column {j} sums to {int(s)}")
    return violations


def check_transitivity(model: PuzzleModel, x: np.ndarray) -> List[str]:
    """
    For every ordered triple (A, B, C):

        grid(A,B)[i,j] = 1 and grid(A,C)[i,k] = 1  =>  grid(B,C)[j,k] = 1
    """
    grids = assignment_to_grids(model, x)
    violations = []
    for a, b, c in permutations(model.category_names, 3):
        ab = grid_between(grids, a, b)
        ac = grid_between(grids, a, c)
        bc = grid_between(grids, b, c)
        for i, j, k in zip(*np.nonzero(ab[:, :, None] & ac[:, None, :])):
            if bc[j, k] != 1:
                violations.append(
                    f"{a}[{i}] matches {b}[{j}] and {c}[{k}] but {b}[{j}] x {c}[{k}] is 0"
                )
    return violations


def _holds(lc: LinearConstraint, x: np.ndarray) -> bool:
    lhs = sum(coeff * x[idx] for idx, coeff in zip(lc.indices, lc.coeffs))
    if lc.sense == "==":
        return abs(lhs - lc.rhs) < 1e-6
    if lc.sense == "<=":
        return lhs <= lc.rhs + 1e-6
    return lhs >= lc.rhs - 1e-6


def check_constraints(model: PuzzleModel, x: np.ndarray) -> List[str]:
    """Every collected linear constraint holds on x."""
    violations = []
    for pos, lc in enumerate(model.builder.constraints):
        if not _holds(lc, x):
            violations.append(f"constraint #{pos} ({lc.tag}, {lc.sense} {lc.rhs}) violated")
    return violations


def verify_solution(model: PuzzleModel, x: np.ndarray) -> List[str]:
    """All checks above, concatenated."""
    return (
        check_bijection(model, x)
        + check_transitivity(model, x)
        + check_constraints(model, x)
    )
