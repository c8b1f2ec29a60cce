"""
Integration tests for the global solution invariants.

For every returned assignment:
  - every pair grid is a permutation matrix (bijection)
  - matchings agree across every ordered category triple (transitivity)
  - every collected constraint holds

Also covers the degenerate inputs: no clues at all, and contradicting clues.
"""

import numpy as np

from logicgrid.catalog.examples import dog_show_puzzle
from logicgrid.catalog.types import PuzzleDefinition
from logicgrid.core.errors import InconsistentSolutionError, UnknownCategoryError
from logicgrid.puzzle.clues import CellClue, OffsetClue
from logicgrid.puzzle.model import build_model
from logicgrid.runners.kernel import build_model_from_definition, solve_puzzle_with_diagnostics
from logicgrid.runners.results import check_bijection, check_transitivity, verify_solution
from logicgrid.solver.lp_solver import find_solutions, solve_model


FOUR_BY_FOUR = {
    "people": ["Amanda", "Jack", "Mike", "Rachel"],
    "years": ["2013", "2014", "2015", "2016"],
    "destinations": ["London", "Rio de Janeiro", "Sydney", "Tokyo"],
    "transport": ["Bus", "Car", "Plane", "Train"],
}


def test_empty_clue_set():
    """
    No clues: the model is feasible, the solution only satisfies the
    structural invariants, and it is not unique.
    """
    print("\n" + "=" * 70)
    print("EMPTY CLUE SET TEST")
    print("=" * 70)

    for linearization in ("implication", "auxiliary"):
        model = build_model(FOUR_BY_FOUR, linearization=linearization)
        search = find_solutions(model, limit=5)
        assert search.status in ("OPTIMAL", "FEASIBLE")
        assert len(search.solutions) == 5
        assert not search.is_unique
        for x in search.solutions:
            assert verify_solution(model, x) == []
        print(f"  ✓ {linearization}: 5 distinct solutions, invariants hold")

    print("  ✓ test_empty_clue_set: PASSED")


def test_conflicting_clues_are_infeasible():
    print("\n" + "=" * 70)
    print("CONFLICTING CLUES TEST")
    print("=" * 70)

    definition = PuzzleDefinition(
        name="conflict",
        categories={k: FOUR_BY_FOUR[k] for k in ("people", "years", "destinations")},
        clues=[
            CellClue(("people", "Jack"), ("destinations", "Tokyo")),
            CellClue(("people", "Jack"), ("years", "2013")),
            # Tokyo is not 2013: contradicts the two fixes via transitivity
            CellClue(("years", "2013"), ("destinations", "Tokyo"), 0),
        ],
    )

    table, diagnostics = solve_puzzle_with_diagnostics(definition)
    print(f"  {diagnostics.summary()}")
    assert table is None
    assert diagnostics.status == "infeasible"
    assert diagnostics.solver_status == "INFEASIBLE"

    # Offsets that run off the end of the positional category
    model = build_model(FOUR_BY_FOUR, [
        OffsetClue("years", ("people", "Mike"), ("people", "Jack"), 4),
    ])
    assert solve_model(model).status == "INFEASIBLE"

    print("  ✓ test_conflicting_clues_are_infeasible: PASSED")


def test_repeated_solving_is_stable():
    """Solving the same model repeatedly returns valid solutions every time."""
    model = build_model_from_definition(dog_show_puzzle())
    constraints_before = model.num_constraints

    first = solve_model(model)
    assert first.is_feasible
    for _ in range(3):
        result = solve_model(model)
        assert result.is_feasible
        assert check_bijection(model, result.assignment) == []
        assert check_transitivity(model, result.assignment) == []
        # Unique puzzle: every run returns the same grids
        assert np.array_equal(result.assignment, first.assignment)

    assert model.num_constraints == constraints_before


def test_checks_detect_broken_assignments():
    model = build_model(FOUR_BY_FOUR)
    result = solve_model(model)
    x = result.assignment.copy()

    # Flip two cells of the people x years grid: still a permutation there,
    # but no longer consistent with the other grids
    grid = x[:16].reshape(4, 4)
    grid[[0, 1]] = grid[[1, 0]]
    x[:16] = grid.reshape(-1)

    assert check_bijection(model, x) == []
    assert check_transitivity(model, x) != []

    x[0] = 1 - x[0]
    assert check_bijection(model, x) != []


def test_not_unique_status():
    definition = PuzzleDefinition(
        name="loose",
        categories={k: FOUR_BY_FOUR[k] for k in ("people", "years", "destinations")},
        clues=[CellClue(("people", "Jack"), ("destinations", "Tokyo"))],
    )
    table, diagnostics = solve_puzzle_with_diagnostics(definition, check_unique=True)
    assert table is not None
    assert diagnostics.unique is False
    assert diagnostics.status == "not_unique"
    assert diagnostics.violations == []


def test_unknown_anchor_rejected_before_solving():
    """
    A bad anchor is a construction error. With an unusable backend, a solve
    attempt would come back as status "error" instead of raising.
    """
    definition = PuzzleDefinition(
        name="bad_anchor",
        categories={k: FOUR_BY_FOUR[k] for k in ("people", "years", "destinations")},
        clues=[],
        anchor="pets",
    )
    try:
        solve_puzzle_with_diagnostics(definition, backend="NO_SUCH_SOLVER")
        raise AssertionError("Should have raised UnknownCategoryError")
    except UnknownCategoryError as e:
        print(f"  ✓ Caught expected error: {e}")


def test_violations_are_raised(monkeypatch):
    """An assignment that fails verification never comes back as "ok"."""
    monkeypatch.setattr(
        "logicgrid.runners.kernel.verify_solution",
        lambda model, x: ["people x years: row 0 sums to 2"],
    )
    try:
        solve_puzzle_with_diagnostics(dog_show_puzzle())
        raise AssertionError("Should have raised InconsistentSolutionError")
    except InconsistentSolutionError as e:
        assert "row 0 sums to 2" in str(e)
