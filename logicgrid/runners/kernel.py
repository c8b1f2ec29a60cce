"""
Core kernel runner for the logic-grid solver.

This module provides the main entrypoint for solving a puzzle definition:
  1. Build the PuzzleModel (categories, permutation + consistency constraints)
  2. Fold in the clue constraints
  3. Solve the ILP through the PuLP adapter
  4. Decode x -> SolutionTable
  5. Return diagnostics (status, sizes, invariant checks)

Construction errors (unknown category, bad index...) propagate to the caller.
Infeasible clue sets and solver failures are reported through
SolveDiagnostics.status instead.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from logicgrid.catalog.types import PuzzleDefinition
from logicgrid.core.errors import InconsistentSolutionError
from logicgrid.puzzle.model import Linearization, PuzzleModel, build_model
from logicgrid.runners.results import SolveDiagnostics, verify_solution
from logicgrid.solver.decoding import SolutionTable, extract_table
from logicgrid.solver.lp_solver import DEFAULT_BACKEND, find_solutions, solve_model


logger = logging.getLogger(__name__)


def build_model_from_definition(
    definition: PuzzleDefinition,
    linearization: Linearization = "implication",
) -> PuzzleModel:
    """Build the full constraint model of a puzzle definition."""
    return build_model(
        definition.categories,
        definition.clues,
        name=definition.name,
        linearization=linearization,
    )


def solve_puzzle_with_diagnostics(
    definition: PuzzleDefinition,
    backend: str = DEFAULT_BACKEND,
    time_limit: Optional[float] = None,
    linearization: Linearization = "implication",
    check_unique: bool = False,
    msg: bool = False,
) -> Tuple[Optional[SolutionTable], SolveDiagnostics]:
    """
    Solve a puzzle and return both the table and comprehensive diagnostics.

    Args:
        definition: Puzzle categories and clues
        backend: PuLP solver name
        time_limit: Optional solver time limit (seconds)
        linearization: "implication" or "auxiliary" consistency constraints
        check_unique: If True, look for a second solution; status becomes
                      "not_unique" when one exists (the first table is still
                      returned)
        msg: Forward solver output

    Returns:
        Tuple of (table, diagnostics):
          - table: SolutionTable, or None if no solution was found
          - diagnostics: SolveDiagnostics with:
              - status: "ok" | "infeasible" | "not_unique" | "error"
              - solver_status: adapter status ("OPTIMAL", "INFEASIBLE", ...)
              - num_variables, num_constraints, constraint_counts

    Raises:
        PuzzleModelError subclasses: for invalid categories, clues or anchor
        InconsistentSolutionError: if the returned assignment breaks the
                                   bijection, transitivity or any constraint

    Example:
        >>> table, diag = solve_puzzle_with_diagnostics(travel_puzzle())
        >>> diag.status
        'ok'
        >>> table.row_for("Jack")
        ('Jack', '2016', 'Tokyo')
    """
    model = build_model_from_definition(definition, linearization)
    if definition.anchor is not None:
        model.category(definition.anchor)

    diagnostics = SolveDiagnostics(
        puzzle_name=definition.name,
        status="error",
        solver_status="",
        backend=backend,
        num_categories=model.p,
        category_size=model.n,
        num_variables=model.num_variables,
        num_constraints=model.num_constraints,
        num_clues=len(model.clues),
        constraint_counts=model.builder.count_by_tag(),
    )

    if check_unique:
        search = find_solutions(model, limit=2, backend=backend, time_limit=time_limit, msg=msg)
        if search.solutions:
            raw_status, assignment = search.first_status, search.solutions[0]
            if search.exhausted or len(search.solutions) > 1:
                diagnostics.unique = search.is_unique
        else:
            raw_status, assignment = search.status, None
        error_message = search.error_message
    else:
        result = solve_model(model, backend=backend, time_limit=time_limit, msg=msg)
        raw_status, assignment = result.status, result.assignment
        error_message = result.error_message
    diagnostics.solver_status = raw_status

    if raw_status == "INFEASIBLE":
        diagnostics.status = "infeasible"
        logger.info("%s: clues admit no solution", definition.name)
        return None, diagnostics

    if assignment is None:
        diagnostics.status = "error"
        diagnostics.error_message = error_message or f"Solver status: {raw_status}"
        logger.warning("%s: solver error: %s", definition.name, diagnostics.error_message)
        return None, diagnostics

    table = extract_table(model, assignment, anchor=definition.anchor)
    diagnostics.violations = verify_solution(model, assignment)
    if diagnostics.violations:
        raise InconsistentSolutionError(
            f"{definition.name}: solver returned an assignment that breaks "
            f"{len(diagnostics.violations)} invariant(s): {diagnostics.violations[0]}"
        )
    diagnostics.status = "ok"
    if diagnostics.unique is False:
        diagnostics.status = "not_unique"

    logger.info("%s", diagnostics.summary())
    return table, diagnostics


def solve_puzzle(
    definition: PuzzleDefinition,
    backend: str = DEFAULT_BACKEND,
    time_limit: Optional[float] = None,
    linearization: Linearization = "implication",
) -> Optional[SolutionTable]:
    """Convenience wrapper that returns only the table (None if unsolved)."""
    table, _ = solve_puzzle_with_diagnostics(
        definition, backend=backend, time_limit=time_limit, linearization=linearization,
    )
    return table
