"""
Command-line runner for logic-grid puzzles.

Solves a puzzle definition (JSON file or built-in example) and prints the
decoded table.

Usage:
    python -m logicgrid.runners.solve_puzzle --example travel
    python -m logicgrid.runners.solve_puzzle puzzles/my_puzzle.json --check-unique
    python -m logicgrid.runners.solve_puzzle --example dog_show \
        --backend HiGHS_CMD --time-limit 10 --linearization auxiliary

Exit codes:
    0  a solution was found
    1  invalid puzzle file or definition, infeasible clues, solver error,
       or a non-unique solution when --check-unique is given
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from logicgrid.catalog.examples import EXAMPLES
from logicgrid.catalog.store import load_puzzle_definition, save_puzzle_definition
from logicgrid.catalog.types import PuzzleDefinition
from logicgrid.core.errors import PuzzleDefinitionError, PuzzleModelError
from logicgrid.runners.kernel import solve_puzzle_with_diagnostics
from logicgrid.solver.lp_solver import DEFAULT_BACKEND


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the puzzle runner.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Solve a logic-grid puzzle as a binary integer program."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "puzzle_path",
        type=Path,
        nargs="?",
        help="Path to a puzzle definition JSON file.",
    )
    source.add_argument(
        "--example",
        choices=sorted(EXAMPLES),
        help="Solve one of the built-in worked examples.",
    )
    parser.add_argument(
        "--backend",
        default=DEFAULT_BACKEND,
        help=f"PuLP solver name (default: {DEFAULT_BACKEND}).",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Solver time limit in seconds.",
    )
    parser.add_argument(
        "--linearization",
        choices=["implication", "auxiliary"],
        default="implication",
        help="Encoding of the cross-grid consistency constraints.",
    )
    parser.add_argument(
        "--check-unique",
        action="store_true",
        help="Also search for a second solution and fail if one exists.",
    )
    parser.add_argument(
        "--save",
        type=Path,
        default=None,
        help="Write the puzzle definition to this JSON path before solving.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log model construction and solver progress.",
    )
    return parser.parse_args(argv)


def load_definition(args: argparse.Namespace) -> PuzzleDefinition:
    if args.example:
        return EXAMPLES[args.example]()
    return load_puzzle_definition(args.puzzle_path)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        definition = load_definition(args)
        if args.save is not None:
            save_puzzle_definition(definition, args.save)
            logger.info("Saved %s to %s", definition.name, args.save)

        table, diagnostics = solve_puzzle_with_diagnostics(
            definition,
            backend=args.backend,
            time_limit=args.time_limit,
            linearization=args.linearization,
            check_unique=args.check_unique,
        )
    except (FileNotFoundError, PuzzleDefinitionError, PuzzleModelError) as e:
        logger.error("%s", e)
        return 1

    print(diagnostics.summary())
    if table is None:
        return 1

    print()
    print(table.format())
    return 0 if diagnostics.status == "ok" else 1


if __name__ == "__main__":
    sys.exit(main())
