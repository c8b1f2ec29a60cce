"""
Catalog storage for puzzle definitions.

This module loads and saves PuzzleDefinition objects as JSON files.

File structure:
{
  "name": "travel",
  "description": "...",
  "anchor": "people",                      # optional
  "categories": {
    "people": ["Amanda", "Jack", ...],     # key order = registration order
    ...
  },
  "clues": [
    {"kind": "cell", "x": ["people", "Jack"], "y": ["destinations", "Tokyo"], "value": 1},
    {"kind": "offset", "position": "years", "x": [...], "y": [...], "delta": 1},
    ...
  ]
}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from logicgrid.catalog.types import PuzzleDefinition, clue_from_dict, clue_to_dict
from logicgrid.core.errors import PuzzleDefinitionError


logger = logging.getLogger(__name__)


def definition_to_dict(definition: PuzzleDefinition) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": definition.name,
        "description": definition.description,
        "categories": {name: list(labels) for name, labels in definition.categories.items()},
        "clues": [clue_to_dict(clue) for clue in definition.clues],
    }
    if definition.anchor is not None:
        data["anchor"] = definition.anchor
    return data


def definition_from_dict(data: Dict[str, Any]) -> PuzzleDefinition:
    """
    Build a PuzzleDefinition from its JSON form.

    Only the shape of the document is checked here; category sizes, label
    lookups etc. are validated when the model is built.

    Raises:
        PuzzleDefinitionError: If required fields are missing or mistyped
    """
    if not isinstance(data, dict):
        raise PuzzleDefinitionError(f"Puzzle definition must be an object, got {type(data).__name__}")

    categories = data.get("categories")
    if not isinstance(categories, dict) or not categories:
        raise PuzzleDefinitionError("Puzzle definition needs a non-empty 'categories' object")
    for name, labels in categories.items():
        if not isinstance(labels, list):
            raise PuzzleDefinitionError(f"Labels of category '{name}' must be a list")

    raw_clues = data.get("clues", [])
    if not isinstance(raw_clues, list):
        raise PuzzleDefinitionError("'clues' must be a list")

    clues = [clue_from_dict(raw, where=f"clue #{n}") for n, raw in enumerate(raw_clues)]

    return PuzzleDefinition(
        name=str(data.get("name", "logic_grid")),
        categories={str(name): [str(label) for label in labels]
                    for name, labels in categories.items()},
        clues=clues,
        anchor=data.get("anchor"),
        description=str(data.get("description", "")),
    )


def load_puzzle_definition(path: Path) -> PuzzleDefinition:
    """
    Load a puzzle definition from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        PuzzleDefinitionError: If the file is not valid JSON or malformed
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PuzzleDefinitionError(f"{path}: invalid JSON ({e})") from None

    definition = definition_from_dict(data)
    logger.debug("Loaded puzzle %s from %s (%d clues)", definition.name, path, len(definition.clues))
    return definition


def save_puzzle_definition(definition: PuzzleDefinition, path: Path) -> None:
    """
    Save a puzzle definition as JSON, creating parent directories.

    Example:
        >>> save_puzzle_definition(travel_puzzle(), Path("puzzles/travel.json"))
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(definition_to_dict(definition), f, indent=2)
        f.write("\n")
