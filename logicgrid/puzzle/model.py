"""
Puzzle model: categories, pair grids and the constraint system over them.

A PuzzleModel owns:
  - the registered categories (p of them, each of size n)
  - one n x n 0/1 grid per unordered category pair, laid out in the x vector
    as described in logicgrid/constraints/indexing.py
  - a ConstraintBuilder collecting every structural, consistency and clue
    constraint

Lifecycle:
  1. add_category(...)                    (p times)
  2. build_structural_constraints()       allocates grids, permutation rows/cols
  3. build_consistency_constraints()      transitivity across category triples
  4. add_clue_constraint(...) / fix(...)  clue-derived constraints
  5. hand the model to logicgrid.solver.lp_solver.solve_model

No objective is used; solving is pure feasibility.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Sequence, Tuple

import numpy as np

from logicgrid.constraints.builder import ConstraintBuilder, add_permutation_constraints
from logicgrid.constraints.indexing import (
    canonical_pairs,
    cell_index,
    num_grid_variables,
    pair_slot,
)
from logicgrid.core.categories import Category, EntityKey, EntityRef
from logicgrid.core.errors import (
    DuplicateCategoryError,
    ModelStateError,
    SizeMismatchError,
    UnknownCategoryError,
)
from logicgrid.puzzle.clues import (
    CellClue,
    DistinctClue,
    EitherOrClue,
    OffsetClue,
    OrderClue,
    apply_clue,
)


logger = logging.getLogger(__name__)

Linearization = Literal["implication", "auxiliary"]


class PuzzleModel:
    """
    Binary integer model of a logic-grid puzzle.

    Example:
        >>> model = PuzzleModel("travel")
        >>> model.add_category("people", ["Amanda", "Jack", "Mike", "Rachel"])
        >>> model.add_category("years", ["2013", "2014", "2015", "2016"])
        >>> model.add_category("destinations", ["London", "Rio de Janeiro", "Sydney", "Tokyo"])
        >>> model.build_structural_constraints()
        >>> model.build_consistency_constraints()
        >>> model.fix(("people", "Amanda"), ("years", "2013"))
        1
        >>> model.num_variables
        48
    """

    def __init__(self, name: str = "logic_grid"):
        self.name = name
        self.categories: List[Category] = []
        self.builder = ConstraintBuilder()
        self.clues: List = []
        self.linearization: Linearization | None = None

        self._positions: Dict[str, int] = {}
        self._num_aux = 0
        self._structural_built = False
        self._consistency_built = False

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, name: str, labels: Sequence) -> Category:
        """
        Register a category.

        Raises:
            DuplicateCategoryError: If `name` is already registered
            SizeMismatchError: If len(labels) differs from existing categories
            DuplicateLabelError: If a label repeats inside the category
            ModelStateError: If grids were already allocated
        """
        if self._structural_built:
            raise ModelStateError(
                f"Cannot add category '{name}' after structural constraints were built"
            )
        if name in self._positions:
            raise DuplicateCategoryError(f"Category '{name}' is already registered")

        category = Category.from_labels(name, labels)
        if self.categories and category.size != self.n:
            raise SizeMismatchError(
                f"Category '{name}' has {category.size} labels, "
                f"expected {self.n} like the other categories"
            )

        self._positions[category.name] = len(self.categories)
        self.categories.append(category)
        logger.debug("Registered category %s (%d labels)", category.name, category.size)
        return category

    @property
    def n(self) -> int:
        """Size of every category (0 before the first category is added)."""
        return self.categories[0].size if self.categories else 0

    @property
    def p(self) -> int:
        return len(self.categories)

    @property
    def category_names(self) -> List[str]:
        return [c.name for c in self.categories]

    def category(self, name: str) -> Category:
        return self.categories[self.position(name)]

    def position(self, name: str) -> int:
        """
        Registration position of a category.

        Raises:
            UnknownCategoryError: If the category was never registered
        """
        try:
            return self._positions[name]
        except KeyError:
            raise UnknownCategoryError(
                f"Unknown category '{name}' (known: {', '.join(self.category_names)})"
            ) from None

    def resolve(self, ref: EntityRef) -> Tuple[int, int]:
        """
        Resolve an entity reference to (category position, entity index).

        Raises:
            UnknownCategoryError, IndexOutOfRangeError, UnknownLabelError
        """
        name, key = ref
        pos = self.position(name)
        return pos, self.categories[pos].resolve(key)

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    @property
    def num_grid_variables(self) -> int:
        return num_grid_variables(self.p, self.n)

    @property
    def num_variables(self) -> int:
        return self.num_grid_variables + self._num_aux

    @property
    def num_constraints(self) -> int:
        return len(self.builder.constraints)

    def pairs(self) -> List[Tuple[Category, Category]]:
        """Category pairs in grid slot order (lower registration position first)."""
        return [(self.categories[a], self.categories[b]) for a, b in canonical_pairs(self.p)]

    def cell_var(self, a: int, i: int, b: int, j: int) -> int:
        """
        x-vector index of "entity i of category a matches entity j of category b".

        a and b are category positions and may come in either order; the
        grid of the reversed pair is read transposed.
        """
        self._require_grids()
        slot = pair_slot(a, b, self.p)
        if a < b:
            return cell_index(slot, i, j, self.n)
        return cell_index(slot, j, i, self.n)

    def match_var(self, x: EntityRef, y: EntityRef) -> int:
        """x-vector index of the cell matching two entities of different categories."""
        a, i = self.resolve(x)
        b, j = self.resolve(y)
        if a == b:
            raise ValueError(
                f"Entities {x!r} and {y!r} belong to the same category; there is no grid cell"
            )
        return self.cell_var(a, i, b, j)

    def grid_variable_indices(self, row_category: str, col_category: str) -> np.ndarray:
        """
        n x n array of x indices, oriented rows=row_category, cols=col_category.
        """
        a = self.position(row_category)
        b = self.position(col_category)
        if a == b:
            raise ValueError(f"No grid pairs category '{row_category}' with itself")
        n = self.n
        out = np.empty((n, n), dtype=int)
        for i in range(n):
            for j in range(n):
                out[i, j] = self.cell_var(a, i, b, j)
        return out

    def new_aux_variable(self) -> int:
        """Allocate one auxiliary binary variable after the grid block."""
        self._require_grids()
        idx = self.num_grid_variables + self._num_aux
        self._num_aux += 1
        return idx

    def _require_grids(self) -> None:
        if not self._structural_built:
            raise ModelStateError(
                "Grids are not allocated yet; call build_structural_constraints() first"
            )

    # ------------------------------------------------------------------
    # Constraint families
    # ------------------------------------------------------------------

    def build_structural_constraints(self) -> None:
        """
        Allocate one grid per unordered category pair and make every grid a
        permutation matrix (each row and each column sums to 1).

        Calling it again is a no-op.
        """
        if self._structural_built:
            return
        if self.p < 2:
            raise ModelStateError(
                f"Need at least two categories to build grids, have {self.p}"
            )

        before = self.num_constraints
        for slot, _ in enumerate(canonical_pairs(self.p)):
            add_permutation_constraints(self.builder, slot, self.n)
        self._structural_built = True

        logger.info(
            "Built %d pair grids (%d variables, %d permutation constraints)",
            len(canonical_pairs(self.p)), self.num_grid_variables,
            self.num_constraints - before,
        )

    def build_consistency_constraints(self, linearization: Linearization = "implication") -> None:
        """
        Tie the pair grids into one global matching.

        For every ordered triple of categories (A, B, C) and all i, j, k:

            grid(A,B)[i,j] AND grid(A,C)[i,k]  ->  grid(B,C)[j,k]

        linearization:
            "implication": grid(A,B)[i,j] + grid(A,C)[i,k] - grid(B,C)[j,k] <= 1
            "auxiliary":   exact AND on an auxiliary z, then z <= grid(B,C)[j,k]

        The triples (A, B, C) and (A, C, B) give identical inequalities, so each
        one is emitted once. Calling it again is a no-op.
        """
        self._require_grids()
        if self._consistency_built:
            return
        if linearization not in ("implication", "auxiliary"):
            raise ValueError(f"Unknown linearization: {linearization!r}")

        before = self.num_constraints
        n = self.n
        num_triples = 0
        for a in range(self.p):
            others = [c for c in range(self.p) if c != a]
            for bi, b in enumerate(others):
                for c in others[bi + 1:]:
                    num_triples += 1
                    for i in range(n):
                        for j in range(n):
                            ab = self.cell_var(a, i, b, j)
                            for k in range(n):
                                ac = self.cell_var(a, i, c, k)
                                bc = self.cell_var(b, j, c, k)
                                if linearization == "implication":
                                    self.builder.add_implication(ab, ac, bc)
                                else:
                                    z = self.new_aux_variable()
                                    self.builder.add_and_link(ab, ac, bc, z)

        self._consistency_built = True
        self.linearization = linearization
        logger.info(
            "Built consistency constraints over %d category triples (%s, %d constraints)",
            num_triples, linearization, self.num_constraints - before,
        )

    def add_clue_constraint(self, clue) -> int:
        """
        Fold one clue into the constraint system.

        Returns:
            Number of constraints the clue added

        Raises:
            UnknownCategoryError, IndexOutOfRangeError, UnknownLabelError,
            ModelStateError (grids not allocated yet), ValueError (bad value)
        """

        self._require_grids()
        before = self.num_constraints
        apply_clue(self, clue)
        self.clues.append(clue)
        added = self.num_constraints - before
        logger.debug("Clue %s added %d constraints", clue, added)
        return added

    # ------------------------------------------------------------------
    # Clue shortcuts
    # ------------------------------------------------------------------

    def fix(self, x: EntityRef, y: EntityRef, value: int = 1) -> int:
        """x and y are (value=1) / are not (value=0) the same entity."""
        return self.add_clue_constraint(CellClue(x, y, value))

    def forbid(self, x: EntityRef, y: EntityRef) -> int:
        return self.fix(x, y, 0)

    def offset(self, position: str, x: EntityRef, y: EntityRef, delta: int) -> int:
        """pos(x) == pos(y) + delta, positions taken in category `position`."""
        return self.add_clue_constraint(OffsetClue(position, x, y, delta))

    def before(self, position: str, x: EntityRef, y: EntityRef, min_gap: int = 1) -> int:
        """pos(x) + min_gap <= pos(y)."""
        return self.add_clue_constraint(OrderClue(position, x, y, min_gap))

    def either(self, subject: EntityRef, options: Sequence[EntityRef]) -> int:
        """subject matches exactly one of the options."""
        return self.add_clue_constraint(EitherOrClue(subject, tuple(options)))

    def distinct(self, entities: Sequence[EntityRef]) -> int:
        """all listed entities are different entities."""
        return self.add_clue_constraint(DistinctClue(tuple(entities)))

    def __repr__(self) -> str:
        return (
            f"PuzzleModel(name={self.name!r}, categories={self.category_names}, "
            f"n={self.n}, variables={self.num_variables}, constraints={self.num_constraints})"
        )


def build_model(
    categories: Dict[str, Sequence] | Sequence[Tuple[str, Sequence]],
    clues: Sequence = (),
    name: str = "logic_grid",
    linearization: Linearization = "implication",
) -> PuzzleModel:
    """
    Build a complete model in one call: categories, structural and
    consistency constraints, then clues.

    Args:
        categories: {name: labels} (insertion order is registration order) or
                    a sequence of (name, labels) pairs
        clues: Clue objects from logicgrid.puzzle.clues
        name: Model name
        linearization: See PuzzleModel.build_consistency_constraints

    Example:
        >>> model = build_model({"a": "xy", "b": "pq", "c": "uv"})
        >>> model.num_grid_variables
        12
    """
    model = PuzzleModel(name)
    items = categories.items() if isinstance(categories, dict) else categories
    for cat_name, labels in items:
        model.add_category(cat_name, labels)
    model.build_structural_constraints()
    model.build_consistency_constraints(linearization)
    for clue in clues:
        model.add_clue_constraint(clue)
    return model


__all__ = ["PuzzleModel", "build_model", "Linearization", "EntityKey", "EntityRef"]
