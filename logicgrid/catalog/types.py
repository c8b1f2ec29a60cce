"""
Catalog types for puzzle definitions.

This module defines the data structures used to represent a puzzle
independently of any model:
- PuzzleDefinition: categories (name -> ordered labels), clues, anchor
- clue_to_dict / clue_from_dict: JSON-friendly form of the clue dataclasses

These are used by the kernel runner and the CLI to build models, and by
catalog.store to persist puzzles as JSON.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from logicgrid.core.errors import PuzzleDefinitionError
from logicgrid.puzzle.clues import (
    CLUE_TYPES,
    CellClue,
    DistinctClue,
    EitherOrClue,
    OffsetClue,
    OrderClue,
)


@dataclass
class PuzzleDefinition:
    """
    A complete logic-grid puzzle: categories plus hand-translated clues.

    Attributes:
        name: Puzzle identifier
        categories: Category name -> ordered labels (insertion order is
                    registration order)
        clues: Clue objects from logicgrid.puzzle.clues
        anchor: Category whose entities index the result rows (default:
                first category)
        description: Free text, e.g. the original clue wording

    Example:
        >>> definition = PuzzleDefinition(
        ...     name="tiny",
        ...     categories={"people": ["Ann", "Bob"], "pets": ["Cat", "Dog"], "cars": ["VW", "BMW"]},
        ...     clues=[CellClue(("people", "Ann"), ("pets", "Dog"))],
        ... )
        >>> definition.size
        2
    """
    name: str
    categories: Dict[str, List[str]]
    clues: List[Any] = field(default_factory=list)
    anchor: Optional[str] = None
    description: str = ""

    @property
    def size(self) -> int:
        return len(next(iter(self.categories.values()))) if self.categories else 0


def _ref_to_json(ref) -> list:
    category, key = ref
    return [category, key]


def _ref_from_json(raw, where: str) -> tuple:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise PuzzleDefinitionError(
            f"{where}: entity must be a [category, label] pair, got {raw!r}"
        )
    category, key = raw
    if not isinstance(category, str) or not isinstance(key, (str, int)) or isinstance(key, bool):
        raise PuzzleDefinitionError(
            f"{where}: entity must be [str, str|int], got {raw!r}"
        )
    return (category, key)


def clue_to_dict(clue) -> Dict[str, Any]:
    """
    JSON-friendly dict for a clue.

    Example:
        >>> clue_to_dict(CellClue(("people", "Jack"), ("destinations", "Tokyo")))
        {'kind': 'cell', 'x': ['people', 'Jack'], 'y': ['destinations', 'Tokyo'], 'value': 1}
    """
    if isinstance(clue, CellClue):
        return {"kind": "cell", "x": _ref_to_json(clue.x), "y": _ref_to_json(clue.y),
                "value": clue.value}
    if isinstance(clue, OffsetClue):
        return {"kind": "offset", "position": clue.position, "x": _ref_to_json(clue.x),
                "y": _ref_to_json(clue.y), "delta": clue.delta}
    if isinstance(clue, OrderClue):
        return {"kind": "order", "position": clue.position, "x": _ref_to_json(clue.x),
                "y": _ref_to_json(clue.y), "min_gap": clue.min_gap}
    if isinstance(clue, EitherOrClue):
        return {"kind": "either", "subject": _ref_to_json(clue.subject),
                "options": [_ref_to_json(o) for o in clue.options]}
    if isinstance(clue, DistinctClue):
        return {"kind": "distinct", "entities": [_ref_to_json(e) for e in clue.entities]}
    raise PuzzleDefinitionError(f"Cannot serialise clue of type {type(clue).__name__}")


def clue_from_dict(data: Dict[str, Any], where: str = "clue"):
    """
    Inverse of clue_to_dict.

    Raises:
        PuzzleDefinitionError: On unknown kinds, missing fields or bad entities
    """
    if not isinstance(data, dict):
        raise PuzzleDefinitionError(f"{where}: expected an object, got {data!r}")
    kind = data.get("kind")
    if kind not in CLUE_TYPES:
        raise PuzzleDefinitionError(
            f"{where}: unknown clue kind {kind!r} (known: {', '.join(sorted(CLUE_TYPES))})"
        )

    try:
        if kind == "cell":
            return CellClue(
                _ref_from_json(data["x"], where),
                _ref_from_json(data["y"], where),
                int(data.get("value", 1)),
            )
        if kind == "offset":
            return OffsetClue(
                str(data["position"]),
                _ref_from_json(data["x"], where),
                _ref_from_json(data["y"], where),
                int(data["delta"]),
            )
        if kind == "order":
            return OrderClue(
                str(data["position"]),
                _ref_from_json(data["x"], where),
                _ref_from_json(data["y"], where),
                int(data.get("min_gap", 1)),
            )
        if kind == "either":
            return EitherOrClue(
                _ref_from_json(data["subject"], where),
                tuple(_ref_from_json(o, where) for o in data["options"]),
            )
        return DistinctClue(tuple(_ref_from_json(e, where) for e in data["entities"]))
    except PuzzleDefinitionError:
        raise
    except KeyError as e:
        raise PuzzleDefinitionError(f"{where}: missing field {e.args[0]!r} for '{kind}' clue") from None
    except (TypeError, ValueError) as e:
        raise PuzzleDefinitionError(f"{where}: {e}") from None
