"""
Smoke tests for the LP/ILP solver adapter.

These tests verify that solve_model / find_solutions work on small
artificial puzzles (no worked examples).

Test scenarios:
  - 3 categories x 2 labels, one fixing clue -> unique OPTIMAL solution
  - Two contradicting cell fixes -> INFEASIBLE status, no exception
  - Unknown backend name -> SOLVER_ERROR status, no exception
  - No-good cuts enumerate every permutation of an unconstrained puzzle
"""

import numpy as np

from logicgrid.puzzle.model import build_model
from logicgrid.puzzle.clues import CellClue
from logicgrid.solver.lp_solver import (
    build_lp_problem,
    find_solutions,
    is_unique,
    solve_model,
)


def build_tiny_model(clues=()):
    """
    3 categories, 2 labels each:
      people: Ann, Bob
      pets:   Cat, Dog
      cars:   BMW, VW
    """
    return build_model(
        {
            "people": ["Ann", "Bob"],
            "pets": ["Cat", "Dog"],
            "cars": ["BMW", "VW"],
        },
        clues,
        name="tiny",
    )


def test_simple_ilp():
    """
    Ann owns the Dog and Bob drives the VW.

    Expected:
      - people x pets = [[0, 1], [1, 0]]
      - people x cars = [[1, 0], [0, 1]]
      - pets x cars   = [[0, 1], [1, 0]]  (Cat -> Bob -> VW, Dog -> Ann -> BMW)
    """
    print("\n" + "=" * 70)
    print("TEST: Simple ILP (3 categories, 2 labels)")
    print("=" * 70)

    model = build_tiny_model([
        CellClue(("people", "Ann"), ("pets", "Dog")),
        CellClue(("people", "Bob"), ("cars", "VW")),
    ])
    print(f"  {model}")

    result = solve_model(model)
    print(f"  Status: {result.status} ({result.solver_status})")

    assert result.status == "OPTIMAL", f"Expected OPTIMAL, got {result.status}"
    assert result.assignment is not None
    assert result.assignment.shape == (model.num_variables,)
    assert set(np.unique(result.assignment)) <= {0, 1}

    grids = result.assignment.reshape(3, 2, 2)
    assert np.array_equal(grids[0], [[0, 1], [1, 0]]), f"people x pets: {grids[0]}"
    assert np.array_equal(grids[1], [[1, 0], [0, 1]]), f"people x cars: {grids[1]}"
    assert np.array_equal(grids[2], [[0, 1], [1, 0]]), f"pets x cars: {grids[2]}"

    print("  ✓ test_simple_ilp: PASSED")


def test_infeasible_constraints():
    """
    Fixing the same cell to both 1 and 0 must give INFEASIBLE, not a crash.
    """
    print("\n" + "=" * 70)
    print("TEST: Infeasible constraints detection")
    print("=" * 70)

    model = build_tiny_model([
        CellClue(("people", "Ann"), ("pets", "Dog"), 1),
        CellClue(("people", "Ann"), ("pets", "Dog"), 0),
    ])

    result = solve_model(model)
    print(f"  Status: {result.status} ({result.solver_status})")

    assert result.status == "INFEASIBLE", f"Expected INFEASIBLE, got {result.status}"
    assert result.assignment is None
    assert not result.is_feasible

    print("  ✓ test_infeasible_constraints: PASSED")


def test_constant_contradiction_short_circuits():
    """
    A clue relating two labels of the same category reduces to a constant;
    a false constant makes the problem infeasible before the solver runs.
    """
    print("\n" + "=" * 70)
    print("TEST: Constant contradiction")
    print("=" * 70)

    model = build_tiny_model([CellClue(("people", "Ann"), ("people", "Bob"))])

    prob, _ = build_lp_problem(model)
    assert prob is None, "Expected no pulp problem for a violated constant row"

    result = solve_model(model)
    assert result.status == "INFEASIBLE", f"Expected INFEASIBLE, got {result.status}"

    print("  ✓ test_constant_contradiction_short_circuits: PASSED")


def test_unknown_backend_is_solver_error():
    """
    An unknown backend is an environment problem: SOLVER_ERROR, not an exception.
    """
    print("\n" + "=" * 70)
    print("TEST: Unknown backend")
    print("=" * 70)

    model = build_tiny_model()
    result = solve_model(model, backend="NO_SUCH_SOLVER")
    print(f"  Status: {result.status}, message: {result.error_message}")

    assert result.status == "SOLVER_ERROR"
    assert result.assignment is None
    assert result.error_message

    print("  ✓ test_unknown_backend_is_solver_error: PASSED")


def test_find_solutions_enumerates_all():
    """
    With no clues, a 3 x 2 puzzle has 2! * 2! = 4 solutions
    (pick people x pets and people x cars freely; pets x cars follows).
    """
    print("\n" + "=" * 70)
    print("TEST: Enumerate solutions with no-good cuts")
    print("=" * 70)

    model = build_tiny_model()
    search = find_solutions(model, limit=10)
    print(f"  Found {len(search.solutions)} solutions, exhausted={search.exhausted}")

    assert search.exhausted
    assert len(search.solutions) == 4
    distinct = {tuple(s[: model.num_grid_variables]) for s in search.solutions}
    assert len(distinct) == 4, "Solutions must be pairwise distinct"
    assert not search.is_unique

    print("  ✓ test_find_solutions_enumerates_all: PASSED")


def test_is_unique():
    """One fixing clue pins the tiny puzzle only partially; two pin it fully."""
    print("\n" + "=" * 70)
    print("TEST: Uniqueness check")
    print("=" * 70)

    partial = build_tiny_model([CellClue(("people", "Ann"), ("pets", "Dog"))])
    full = build_tiny_model([
        CellClue(("people", "Ann"), ("pets", "Dog")),
        CellClue(("people", "Bob"), ("cars", "VW")),
    ])

    assert not is_unique(partial)
    assert is_unique(full)

    print("  ✓ test_is_unique: PASSED")


def test_solve_does_not_mutate_model():
    """Searching adds cuts to the pulp problem only."""
    model = build_tiny_model()
    before = model.num_constraints
    find_solutions(model, limit=3)
    assert model.num_constraints == before


if __name__ == "__main__":
    print("\n" + "=" * 70)
    print("LP SOLVER SMOKE TEST SUITE")
    print("=" * 70)

    test_simple_ilp()
    test_infeasible_constraints()
    test_constant_contradiction_short_circuits()
    test_unknown_backend_is_solver_error()
    test_find_solutions_enumerates_all()
    test_is_unique()
    test_solve_does_not_mutate_model()

    print("\n" + "=" * 70)
    print("✓ ALL TESTS PASSED")
    print("=" * 70)
