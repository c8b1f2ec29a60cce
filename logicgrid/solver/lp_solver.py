"""
LP/ILP solver wrapper for logic-grid puzzle models.

This module provides the solver boundary that:
  - Takes the constraints collected by a PuzzleModel
  - Creates binary variables x[k] in {0,1}, one per model variable
  - Adds all constraints with a zero objective (pure feasibility)
  - Solves using a PuLP backend (CBC by default)
  - Returns a SolveResult with a status and a 0/1 numpy assignment

Statuses:
  - "OPTIMAL":      solver proved the returned assignment feasible (zero objective)
  - "FEASIBLE":     solver stopped early (e.g. time limit) with an incumbent
  - "INFEASIBLE":   the clue set admits no solution
  - "SOLVER_ERROR": backend unavailable, crashed or stopped without a solution

INFEASIBLE and SOLVER_ERROR are reported, never raised.

Uses standard pulp library (no custom solver implementation).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

import numpy as np
import pulp

from logicgrid.constraints.builder import LinearConstraint
from logicgrid.puzzle.model import PuzzleModel


logger = logging.getLogger(__name__)

SolveStatus = Literal["OPTIMAL", "FEASIBLE", "INFEASIBLE", "SOLVER_ERROR"]

DEFAULT_BACKEND = "PULP_CBC_CMD"


@dataclass
class SolveResult:
    """
    Outcome of one solver call.

    Attributes:
        status: One of "OPTIMAL", "FEASIBLE", "INFEASIBLE", "SOLVER_ERROR"
        assignment: Length num_variables int array of 0/1 values, or None
                    when no solution was found
        solver_status: Raw status string from pulp (e.g. "Optimal", "Infeasible")
        backend: PuLP solver name used
        error_message: Backend error text for status "SOLVER_ERROR"
    """
    status: SolveStatus
    assignment: Optional[np.ndarray]
    solver_status: str
    backend: str = DEFAULT_BACKEND
    error_message: Optional[str] = None

    @property
    def is_feasible(self) -> bool:
        return self.status in ("OPTIMAL", "FEASIBLE")


@dataclass
class SolutionSearch:
    """
    Result of enumerating solutions with no-good cuts.

    Attributes:
        solutions: Distinct assignments found, in discovery order
        status: Status of the last solver call
        exhausted: True if the search ended because no further solution
                   exists (so `solutions` is complete)
        first_status: Status of the call that found the first solution
        error_message: Backend error text if the search stopped on SOLVER_ERROR
    """
    solutions: List[np.ndarray] = field(default_factory=list)
    status: SolveStatus = "INFEASIBLE"
    exhausted: bool = False
    first_status: Optional[SolveStatus] = None
    error_message: Optional[str] = None

    @property
    def is_unique(self) -> bool:
        return self.exhausted and len(self.solutions) == 1


def make_solver(
    backend: str = DEFAULT_BACKEND,
    time_limit: Optional[float] = None,
    msg: bool = False,
):
    """
    Instantiate a PuLP solver by name.

    Args:
        backend: Any name from pulp.listSolvers(), e.g. "PULP_CBC_CMD",
                 "HiGHS_CMD", "GLPK_CMD"
        time_limit: Optional wall-clock limit in seconds, passed to the backend
        msg: Whether the backend prints its own log

    Raises:
        pulp.PulpSolverError: If the backend name is unknown
    """
    kwargs = {"msg": msg}
    if time_limit is not None:
        kwargs["timeLimit"] = time_limit
    return pulp.getSolver(backend, **kwargs)


def _constant_holds(lc: LinearConstraint) -> bool:
    """Evaluate a constraint that has no variables left: 0 sense rhs."""
    if lc.sense == "==":
        return lc.rhs == 0.0
    if lc.sense == "<=":
        return 0.0 <= lc.rhs
    return 0.0 >= lc.rhs


def build_lp_problem(
    model: PuzzleModel,
) -> Tuple[Optional[pulp.LpProblem], List[pulp.LpVariable]]:
    """
    Translate the model's constraints into a pulp problem.

    Returns:
        (prob, x): the problem and its variables indexed like the model's
        x vector. prob is None when a constant constraint is violated, i.e.
        the model is infeasible before any solver is involved.
    """
    # 1. Create model
    prob = pulp.LpProblem(model.name.replace(" ", "_") or "logic_grid", pulp.LpMinimize)

    # 2. Create binary variables x[k]
    x = [
        pulp.LpVariable(f"x_{k}", lowBound=0, upBound=1, cat=pulp.LpBinary)
        for k in range(model.num_variables)
    ]

    # 3. Add constraints from model.builder.constraints
    for lc in model.builder.constraints:
        assert len(lc.indices) == len(lc.coeffs), \
            f"Constraint has mismatched indices/coeffs: {len(lc.indices)} vs {len(lc.coeffs)}"

        if not lc.indices:
            if _constant_holds(lc):
                continue
            logger.info("Constant %s constraint violated: 0 %s %s", lc.tag, lc.sense, lc.rhs)
            return None, x

        expr = pulp.lpSum(coeff * x[idx] for idx, coeff in zip(lc.indices, lc.coeffs))
        if lc.sense == "==":
            prob += (expr == lc.rhs)
        elif lc.sense == "<=":
            prob += (expr <= lc.rhs)
        else:
            prob += (expr >= lc.rhs)

    # 4. Zero objective (feasibility only)
    prob += 0

    return prob, x


def _run(prob: pulp.LpProblem, x: List[pulp.LpVariable], solver, backend: str) -> SolveResult:
    try:
        status = prob.solve(solver)
    except pulp.PulpSolverError as e:
        logger.warning("Solver backend %s failed: %s", backend, e)
        return SolveResult("SOLVER_ERROR", None, "Error", backend, error_message=str(e))

    status_str = pulp.LpStatus[status]

    if status == pulp.LpStatusInfeasible:
        return SolveResult("INFEASIBLE", None, status_str, backend)

    if status != pulp.LpStatusOptimal:
        return SolveResult(
            "SOLVER_ERROR", None, status_str, backend,
            error_message=f"Solver status: {status_str}. No solution available.",
        )

    # Guard against None or float noise (use > 0.5 threshold)
    assignment = np.zeros(len(x), dtype=int)
    for k, var in enumerate(x):
        val = var.varValue
        assignment[k] = 1 if val is not None and val > 0.5 else 0

    solve_status: str = "OPTIMAL"
    if prob.sol_status == pulp.LpSolutionIntegerFeasible:
        solve_status = "FEASIBLE"
    return SolveResult(solve_status, assignment, status_str, backend)


def solve_model(
    model: PuzzleModel,
    backend: str = DEFAULT_BACKEND,
    time_limit: Optional[float] = None,
    msg: bool = False,
) -> SolveResult:
    """
    Solve a puzzle model and return its status and assignment.

    The model is not modified; a fresh pulp problem is built per call.

    Args:
        model: PuzzleModel with structural, consistency and clue constraints
        backend: PuLP solver name (default: bundled CBC)
        time_limit: Optional solver time limit in seconds
        msg: Forward solver output to stdout

    Returns:
        SolveResult. On "OPTIMAL"/"FEASIBLE", `assignment` holds one 0/1 entry
        per model variable.

    Example:
        >>> result = solve_model(model)
        >>> result.status
        'OPTIMAL'
    """
    prob, x = build_lp_problem(model)
    if prob is None:
        return SolveResult("INFEASIBLE", None, "Infeasible", backend)

    try:
        solver = make_solver(backend, time_limit, msg)
    except pulp.PulpSolverError as e:
        return SolveResult("SOLVER_ERROR", None, "Error", backend, error_message=str(e))
    if not solver.available():
        return SolveResult(
            "SOLVER_ERROR", None, "Not Available", backend,
            error_message=f"Solver backend '{backend}' is not available",
        )

    result = _run(prob, x, solver, backend)
    logger.info(
        "Solved %s with %s: %s (%d variables, %d constraints)",
        model.name, backend, result.status, model.num_variables, model.num_constraints,
    )
    return result


def find_solutions(
    model: PuzzleModel,
    limit: int = 2,
    backend: str = DEFAULT_BACKEND,
    time_limit: Optional[float] = None,
    msg: bool = False,
) -> SolutionSearch:
    """
    Enumerate up to `limit` distinct solutions.

    After each solution a no-good cut over the grid variables,

        sum_{k : x*[k] = 1} x[k] <= (number of ones) - 1,

    is added to the pulp problem so the same grids cannot be returned again.
    The cuts never touch the model itself.

    Example:
        >>> search = find_solutions(model, limit=2)
        >>> search.is_unique
        True
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    search = SolutionSearch()
    prob, x = build_lp_problem(model)
    if prob is None:
        search.exhausted = True
        return search

    try:
        solver = make_solver(backend, time_limit, msg)
    except pulp.PulpSolverError as e:
        logger.warning("Solver backend %s unavailable: %s", backend, e)
        search.status = "SOLVER_ERROR"
        search.error_message = str(e)
        return search
    if not solver.available():
        search.status = "SOLVER_ERROR"
        search.error_message = f"Solver backend '{backend}' is not available"
        return search

    num_grid = model.num_grid_variables
    while len(search.solutions) < limit:
        result = _run(prob, x, solver, backend)
        search.status = result.status
        if result.status == "INFEASIBLE":
            search.exhausted = True
            break
        if not result.is_feasible:
            search.error_message = result.error_message
            break

        if search.first_status is None:
            search.first_status = result.status
        search.solutions.append(result.assignment)
        ones = [k for k in range(num_grid) if result.assignment[k] == 1]
        prob += (pulp.lpSum(x[k] for k in ones) <= len(ones) - 1)

    logger.info(
        "Solution search on %s: %d found (exhausted=%s)",
        model.name, len(search.solutions), search.exhausted,
    )
    return search


def is_unique(model: PuzzleModel, backend: str = DEFAULT_BACKEND,
              time_limit: Optional[float] = None) -> bool:
    """True if the model has exactly one solution."""
    return find_solutions(model, limit=2, backend=backend, time_limit=time_limit).is_unique
