"""
Exception types for puzzle model construction and solution extraction.

Construction errors (subclasses of PuzzleModelError) are raised synchronously
while categories and clues are registered; the caller fixes the input and
retries. InconsistentSolutionError signals a broken constraint system and is
never turned into a solve status.

Solver outcomes (INFEASIBLE, SOLVER_ERROR) are NOT exceptions; they are
reported as statuses on SolveResult (see logicgrid/solver/lp_solver.py).
"""


class PuzzleModelError(Exception):
    """Base class for errors raised while building a puzzle model."""
    pass


class DuplicateCategoryError(PuzzleModelError):
    """Raised when a category name is registered twice."""
    pass


class SizeMismatchError(PuzzleModelError):
    """Raised when a category's label count differs from the puzzle size n."""
    pass


class DuplicateLabelError(PuzzleModelError):
    """Raised when a label appears twice inside one category."""
    pass


class UnknownCategoryError(PuzzleModelError):
    """Raised when a clue references a category that was never registered."""
    pass


class IndexOutOfRangeError(PuzzleModelError):
    """Raised when an entity index falls outside 0..n-1."""
    pass


class UnknownLabelError(IndexOutOfRangeError):
    """Raised when an entity label is not part of its category."""
    pass


class ModelStateError(PuzzleModelError):
    """Raised when an operation is called at the wrong point of the model lifecycle."""
    pass


class InconsistentSolutionError(Exception):
    """
    Raised when a solved assignment violates the one-per-row/column invariant.

    This can only happen if the constraint system itself is wrong, so it is
    treated as an internal bug and propagated loudly.
    """
    pass


class PuzzleDefinitionError(ValueError):
    """Raised when a puzzle definition or one of its clue dicts is malformed."""
    pass
