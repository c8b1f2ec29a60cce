"""
Integration tests for the worked example puzzles.

These tests run the full pipeline (definition -> model -> CBC -> table) and
validate:
  - the decoded table of both worked examples
  - uniqueness of both solutions
  - both consistency linearisations give the same table
  - the command-line runner end to end
"""

from logicgrid.catalog.examples import dog_show_puzzle, travel_puzzle
from logicgrid.catalog.store import save_puzzle_definition
from logicgrid.runners.kernel import (
    build_model_from_definition,
    solve_puzzle,
    solve_puzzle_with_diagnostics,
)
from logicgrid.runners.solve_puzzle import main
from logicgrid.solver.lp_solver import find_solutions


TRAVEL_EXPECTED = {
    "Amanda": ("2013", "London"),
    "Rachel": ("2014", "Rio de Janeiro"),
    "Mike": ("2015", "Sydney"),
    "Jack": ("2016", "Tokyo"),
}

DOG_SHOW_EXPECTED = {
    "Cheetah": ("Collie", "Tunnel", "1"),
    "Thor": ("Shepherd", "Poles", "3"),
    "Suzie": ("Boxer", "Plank", "4"),
    "Beany": ("Terrier", "Tire", "2"),
}


def test_travel_puzzle():
    """
    Scenario 1: 3 categories x 4 entities.
    """
    print("\n" + "=" * 70)
    print("TRAVEL PUZZLE INTEGRATION TEST")
    print("=" * 70)

    table, diagnostics = solve_puzzle_with_diagnostics(travel_puzzle())
    print(f"  {diagnostics.summary()}")

    assert diagnostics.status == "ok", diagnostics.summary()
    assert diagnostics.violations == []
    assert diagnostics.num_variables == 3 * 16
    assert table is not None
    print(table.format())

    assert table.columns == ("people", "years", "destinations")
    for person, expected in TRAVEL_EXPECTED.items():
        assert table.row_for(person)[1:] == expected, \
            f"{person}: got {table.row_for(person)[1:]}, expected {expected}"

    print("  ✓ test_travel_puzzle: PASSED")


def test_dog_show_puzzle():
    """
    Scenario 2: 4 categories x 4 entities.
    """
    print("\n" + "=" * 70)
    print("DOG SHOW PUZZLE INTEGRATION TEST")
    print("=" * 70)

    table, diagnostics = solve_puzzle_with_diagnostics(dog_show_puzzle())
    print(f"  {diagnostics.summary()}")

    assert diagnostics.status == "ok", diagnostics.summary()
    assert diagnostics.violations == []
    assert diagnostics.num_variables == 6 * 16
    print(table.format())

    assert table.columns == ("dogs", "breeds", "skills", "ranks")
    for dog, expected in DOG_SHOW_EXPECTED.items():
        assert table.row_for(dog)[1:] == expected, \
            f"{dog}: got {table.row_for(dog)[1:]}, expected {expected}"

    print("  ✓ test_dog_show_puzzle: PASSED")


def test_worked_examples_are_unique():
    for definition in (travel_puzzle(), dog_show_puzzle()):
        model = build_model_from_definition(definition)
        search = find_solutions(model, limit=2)
        assert search.exhausted, f"{definition.name}: search did not finish"
        assert len(search.solutions) == 1, \
            f"{definition.name}: {len(search.solutions)} solutions"

        _, diagnostics = solve_puzzle_with_diagnostics(definition, check_unique=True)
        assert diagnostics.unique is True
        assert diagnostics.status == "ok"
        print(f"  ✓ {definition.name}: unique")


def test_auxiliary_linearization_agrees():
    print("\n" + "=" * 70)
    print("LINEARIZATION COMPARISON TEST")
    print("=" * 70)

    for definition in (travel_puzzle(), dog_show_puzzle()):
        implication = solve_puzzle(definition, linearization="implication")
        auxiliary, diagnostics = solve_puzzle_with_diagnostics(
            definition, linearization="auxiliary",
        )
        assert diagnostics.status == "ok"
        assert diagnostics.num_variables > build_model_from_definition(definition).num_variables
        assert auxiliary == implication, f"{definition.name}: tables differ"
        print(f"  ✓ {definition.name}: identical tables "
              f"({diagnostics.num_variables} variables with auxiliaries)")

    print("  ✓ test_auxiliary_linearization_agrees: PASSED")


def test_cli_runs_examples(capsys):
    assert main(["--example", "travel"]) == 0
    out = capsys.readouterr().out
    assert "travel: ok" in out
    assert "Rio de Janeiro" in out

    assert main(["--example", "dog_show", "--check-unique"]) == 0
    out = capsys.readouterr().out
    assert "unique=True" in out


def test_cli_solves_json_file(tmp_path):
    path = tmp_path / "travel.json"
    save_puzzle_definition(travel_puzzle(), path)
    assert main([str(path), "--linearization", "auxiliary"]) == 0

    copy_path = tmp_path / "copies" / "dog_show.json"
    assert main(["--example", "dog_show", "--save", str(copy_path)]) == 0
    assert copy_path.exists()


def test_cli_rejects_bad_input(tmp_path):
    """Unreadable or malformed puzzles exit with 1 and a logged error."""
    broken = tmp_path / "broken.json"
    broken.write_text("{ not json", encoding="utf-8")
    assert main([str(broken)]) == 1

    unknown_kind = tmp_path / "unknown_kind.json"
    unknown_kind.write_text(
        '{"categories": {"a": ["x", "y"], "b": ["p", "q"], "c": ["u", "v"]},'
        ' "clues": [{"kind": "sometimes"}]}',
        encoding="utf-8",
    )
    assert main([str(unknown_kind)]) == 1

    bad_model = tmp_path / "bad_model.json"
    bad_model.write_text(
        '{"categories": {"a": ["x", "y"], "b": ["p", "q", "r"], "c": ["u", "v"]}}',
        encoding="utf-8",
    )
    assert main([str(bad_model)]) == 1

    assert main([str(tmp_path / "missing.json")]) == 1
