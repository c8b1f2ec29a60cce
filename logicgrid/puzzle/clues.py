"""
Clue types and their constraint builders.

Every clue is a small frozen dataclass naming entities by EntityRef
(category, index-or-label). Each kind has a builder function registered in
CLUE_BUILDERS; apply_clue dispatches on the clue's `kind`.

Supported kinds:
  - "cell":     x and y are (value=1) / are not (value=0) the same entity
  - "offset":   pos(x) == pos(y) + delta
  - "order":    pos(x) + min_gap <= pos(y)
  - "either":   subject matches exactly one of several options
  - "distinct": entities are pairwise different

pos(e) is the index of e's entity within the positional category P:
    pos(e) = sum_i i * grid(P, cat(e))[i, idx(e)]
or simply idx(e) when e already belongs to P.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import TYPE_CHECKING, Callable, ClassVar, Dict, Tuple

from logicgrid.constraints.builder import Sense
from logicgrid.core.categories import EntityRef
from logicgrid.core.errors import PuzzleModelError

if TYPE_CHECKING:
    from logicgrid.puzzle.model import PuzzleModel


@dataclass(frozen=True)
class CellClue:
    """
    x and y are the same entity (value=1) or not (value=0).

    Example:
        >>> # "Jack went to Tokyo"
        >>> CellClue(("people", "Jack"), ("destinations", "Tokyo"))
    """
    kind: ClassVar[str] = "cell"

    x: EntityRef
    y: EntityRef
    value: int = 1


@dataclass(frozen=True)
class OffsetClue:
    """
    pos(x) == pos(y) + delta, positions measured in category `position`.

    Example:
        >>> # "Mike travelled the year after Rachel"
        >>> OffsetClue("years", ("people", "Mike"), ("people", "Rachel"), 1)
    """
    kind: ClassVar[str] = "offset"

    position: str
    x: EntityRef
    y: EntityRef
    delta: int


@dataclass(frozen=True)
class OrderClue:
    """
    pos(x) + min_gap <= pos(y): x comes at least min_gap places before y.
    """
    kind: ClassVar[str] = "order"

    position: str
    x: EntityRef
    y: EntityRef
    min_gap: int = 1


@dataclass(frozen=True)
class EitherOrClue:
    """
    subject matches exactly one of the options.

    Options may belong to different categories ("Thor is either the Boxer or
    did the Tunnel"); if both hold at once the clue is violated.
    """
    kind: ClassVar[str] = "either"

    subject: EntityRef
    options: Tuple[EntityRef, ...]


@dataclass(frozen=True)
class DistinctClue:
    """All entities are pairwise different entities."""
    kind: ClassVar[str] = "distinct"

    entities: Tuple[EntityRef, ...]


class _LinearExpr:
    """Accumulates sum(coeff * x[idx]) + constant."""

    def __init__(self):
        self.terms: Dict[int, float] = {}
        self.constant = 0.0

    def add_var(self, idx: int, coeff: float) -> None:
        self.terms[idx] = self.terms.get(idx, 0.0) + coeff

    def emit(self, model: "PuzzleModel", sense: Sense, rhs: float) -> None:
        """
        Emit `expr sense rhs`. An expression with no variables left is still
        emitted as an empty row so that a violated constant relation makes
        the model infeasible instead of vanishing.
        """
        terms = {idx: c for idx, c in self.terms.items() if c != 0.0}
        model.builder.add(list(terms), list(terms.values()), rhs - self.constant,
                          sense, tag="clue")


def _add_match(expr: _LinearExpr, model: "PuzzleModel", x: EntityRef, y: EntityRef,
               coeff: float = 1.0) -> None:
    """Add coeff * [x matches y]; constant when both share a category."""
    a, i = model.resolve(x)
    b, j = model.resolve(y)
    if a == b:
        expr.constant += coeff if i == j else 0.0
    else:
        expr.add_var(model.cell_var(a, i, b, j), coeff)


def _add_position(expr: _LinearExpr, model: "PuzzleModel", position: str, e: EntityRef,
                  coeff: float = 1.0) -> None:
    """Add coeff * pos(e) in the positional category."""
    p = model.position(position)
    b, j = model.resolve(e)
    if b == p:
        expr.constant += coeff * j
        return
    for i in range(model.n):
        if i:
            expr.add_var(model.cell_var(p, i, b, j), coeff * i)


def build_cell_constraints(model: "PuzzleModel", clue: CellClue) -> None:
    if clue.value not in (0, 1):
        raise ValueError(f"A cell can only be fixed to 0 or 1, got {clue.value!r}")
    a, i = model.resolve(clue.x)
    b, j = model.resolve(clue.y)
    if a != b:
        model.builder.fix_variable(model.cell_var(a, i, b, j), clue.value)
        return
    expr = _LinearExpr()
    _add_match(expr, model, clue.x, clue.y)
    expr.emit(model, "==", clue.value)


def build_offset_constraints(model: "PuzzleModel", clue: OffsetClue) -> None:
    expr = _LinearExpr()
    _add_position(expr, model, clue.position, clue.x, 1.0)
    _add_position(expr, model, clue.position, clue.y, -1.0)
    expr.emit(model, "==", clue.delta)


def build_order_constraints(model: "PuzzleModel", clue: OrderClue) -> None:
    if clue.min_gap < 0:
        raise ValueError(f"min_gap must be non-negative, got {clue.min_gap}")
    expr = _LinearExpr()
    _add_position(expr, model, clue.position, clue.x, 1.0)
    _add_position(expr, model, clue.position, clue.y, -1.0)
    expr.emit(model, "<=", -clue.min_gap)


def build_either_constraints(model: "PuzzleModel", clue: EitherOrClue) -> None:
    if not clue.options:
        raise PuzzleModelError("An either/or clue needs at least one option")
    # ("pets", "Dog") and ("pets", 1) name the same option
    options = dict.fromkeys(model.resolve(option) for option in clue.options)
    expr = _LinearExpr()
    for b, j in options:
        option = (model.categories[b].name, j)
        _add_match(expr, model, clue.subject, option)
    expr.emit(model, "==", 1)


def build_distinct_constraints(model: "PuzzleModel", clue: DistinctClue) -> None:
    for e in clue.entities:
        model.resolve(e)
    for x, y in combinations(clue.entities, 2):
        a, i = model.resolve(x)
        b, j = model.resolve(y)
        if a == b and i != j:
            continue
        expr = _LinearExpr()
        _add_match(expr, model, x, y)
        expr.emit(model, "==", 0)


CLUE_BUILDERS: Dict[str, Callable[["PuzzleModel", object], None]] = {
    "cell": build_cell_constraints,
    "offset": build_offset_constraints,
    "order": build_order_constraints,
    "either": build_either_constraints,
    "distinct": build_distinct_constraints,
}

CLUE_TYPES = {
    cls.kind: cls
    for cls in (CellClue, OffsetClue, OrderClue, EitherOrClue, DistinctClue)
}


def apply_clue(model: "PuzzleModel", clue) -> None:
    """
    Look up the builder for the clue's kind and apply it.

    Raises:
        KeyError: If no builder is registered for the clue's kind
    """
    kind = getattr(clue, "kind", None)
    if kind not in CLUE_BUILDERS:
        raise KeyError(f"No builder registered for clue kind '{kind}'")
    CLUE_BUILDERS[kind](model, clue)
