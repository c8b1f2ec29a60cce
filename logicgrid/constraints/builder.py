"""
Linear constraint builder for the constraint system.

This module defines core data structures to collect linear constraints over
the x-vector (0/1 indicators of "entity i of A matches entity j of B").

Constraints have the form:
    sum_i coeffs[i] * x[indices[i]]  (==, <=, >=)  rhs

This is the generic constraint plumbing used by the puzzle model and the clue
builders. No solver logic or puzzle-specific code here.
"""

from dataclasses import dataclass, field
from typing import List, Literal

from logicgrid.constraints.indexing import cell_index


Sense = Literal["==", "<=", ">="]


@dataclass
class LinearConstraint:
    """
    Represents a single linear constraint over the x vector:

        sum_i coeffs[i] * x[indices[i]]  sense  rhs

    Attributes:
        indices: Indices into x
        coeffs: Coefficients (same length as indices)
        rhs: Right-hand side value
        sense: "==", "<=" or ">="
        tag: Short label of the constraint family ("row", "col", "transitivity",
             "clue", ...), used for diagnostics only

    Example:
        # x[5] + x[10] - x[42] <= 1
        LinearConstraint(indices=[5, 10, 42], coeffs=[1.0, 1.0, -1.0], rhs=1.0, sense="<=")
    """
    indices: List[int]
    coeffs: List[float]
    rhs: float
    sense: Sense = "=="
    tag: str = ""


@dataclass
class ConstraintBuilder:
    """
    Collects linear constraints over the x vector.

    This is the main interface the puzzle model uses to emit constraints that
    will later be passed to the LP solver.

    Attributes:
        constraints: List of LinearConstraint objects
    """
    constraints: List[LinearConstraint] = field(default_factory=list)

    def add(
        self,
        indices: List[int],
        coeffs: List[float],
        rhs: float,
        sense: Sense = "==",
        tag: str = "",
    ) -> None:
        """
        Add a generic linear constraint.

        Raises:
            AssertionError: If indices and coeffs have different lengths
            ValueError: If sense is not one of "==", "<=", ">="
        """
        assert len(indices) == len(coeffs), \
            f"indices and coeffs must have same length, got {len(indices)} != {len(coeffs)}"
        if sense not in ("==", "<=", ">="):
            raise ValueError(f"Unknown constraint sense: {sense!r}")

        self.constraints.append(
            LinearConstraint(indices=list(indices), coeffs=list(coeffs),
                             rhs=float(rhs), sense=sense, tag=tag)
        )

    def add_eq(self, indices: List[int], coeffs: List[float], rhs: float, tag: str = "") -> None:
        self.add(indices, coeffs, rhs, "==", tag)

    def add_le(self, indices: List[int], coeffs: List[float], rhs: float, tag: str = "") -> None:
        self.add(indices, coeffs, rhs, "<=", tag)

    def add_ge(self, indices: List[int], coeffs: List[float], rhs: float, tag: str = "") -> None:
        self.add(indices, coeffs, rhs, ">=", tag)

    def fix_variable(self, x_idx: int, value: int, tag: str = "clue") -> None:
        """
        Enforce x[x_idx] = value, value in {0, 1}.

        Example:
            # Amanda travelled in 2013
            builder.fix_variable(cell_index(0, 0, 0, 4), 1)
        """
        if value not in (0, 1):
            raise ValueError(f"A cell can only be fixed to 0 or 1, got {value!r}")
        self.add_eq([x_idx], [1.0], float(value), tag)

    def add_implication(self, a_idx: int, b_idx: int, c_idx: int, tag: str = "transitivity") -> None:
        """
        Enforce (a AND b) -> c as the single inequality:

            x[a] + x[b] - x[c] <= 1

        With a = b = 1 this forces c = 1. It leaves c free otherwise, which is
        exact only together with the permutation constraints on every grid.
        """
        self.add_le([a_idx, b_idx, c_idx], [1.0, 1.0, -1.0], 1.0, tag)

    def add_and_link(self, a_idx: int, b_idx: int, c_idx: int, z_idx: int,
                     tag: str = "transitivity") -> None:
        """
        Enforce z = a AND b (exact linearisation) and z -> c:

            z <= a,  z <= b,  z >= a + b - 1,  z <= c

        z must be a dedicated auxiliary variable.
        """
        self.add_le([z_idx, a_idx], [1.0, -1.0], 0.0, tag)
        self.add_le([z_idx, b_idx], [1.0, -1.0], 0.0, tag)
        self.add_ge([z_idx, a_idx, b_idx], [1.0, -1.0, -1.0], -1.0, tag)
        self.add_le([z_idx, c_idx], [1.0, -1.0], 0.0, tag)

    def count_by_tag(self) -> dict:
        counts: dict = {}
        for lc in self.constraints:
            counts[lc.tag] = counts.get(lc.tag, 0) + 1
        return counts


def add_permutation_constraints(builder: ConstraintBuilder, slot: int, n: int) -> None:
    """
    For the grid of pair slot `slot`, enforce for every i and j:

        sum_j x[s,i,j] = 1      (row i matches exactly one column)
        sum_i x[s,i,j] = 1      (column j matches exactly one row)

    Together with binary x this makes the grid a permutation matrix, i.e. a
    bijection between the two categories.

    Creates 2n constraints.

    Example:
        >>> builder = ConstraintBuilder()
        >>> add_permutation_constraints(builder, slot=0, n=4)
        >>> len(builder.constraints)
        8
    """
    for i in range(n):
        indices = [cell_index(slot, i, j, n) for j in range(n)]
        builder.add_eq(indices, [1.0] * n, 1.0, tag="row")

    for j in range(n):
        indices = [cell_index(slot, i, j, n) for i in range(n)]
        builder.add_eq(indices, [1.0] * n, 1.0, tag="col")
