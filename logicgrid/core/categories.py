"""
Core category types for the logic-grid puzzle model.

A Category is one attribute dimension of the puzzle (people, years, breeds...)
holding n distinct labels in a fixed order. The order matters: the index of a
label is its position, which is what offset / order clues compare.

Entity references:
  - EntityRef: (category_name, index_or_label)
  - int  -> 0-based index into the category's labels; valid indices are
            0..n-1 and anything else raises IndexOutOfRangeError
  - str  -> label, resolved with Category.index_of

Offset and order clues compare differences of indices, so they read the
same whichever base a puzzle's wording counts positions from.
"""

from dataclasses import dataclass
from numbers import Integral
from typing import Sequence, Tuple, TypeAlias, Union

from logicgrid.core.errors import (
    DuplicateLabelError,
    IndexOutOfRangeError,
    UnknownLabelError,
)


# (category name, 0-based index or label)
EntityKey: TypeAlias = Union[int, str]
EntityRef: TypeAlias = Tuple[str, EntityKey]


@dataclass(frozen=True)
class Category:
    """
    One named attribute dimension of the puzzle.

    Attributes:
        name: Category name, unique within a puzzle
        labels: Ordered, distinct labels (length n)

    Example:
        >>> years = Category.from_labels("years", [2013, 2014, 2015, 2016])
        >>> years.index_of("2015")
        2
        >>> years.label_at(0)
        '2013'
    """
    name: str
    labels: Tuple[str, ...]

    @classmethod
    def from_labels(cls, name: str, labels: Sequence) -> "Category":
        """
        Build a Category, normalising labels to strings.

        Raises:
            ValueError: If labels is empty
            DuplicateLabelError: If a label occurs more than once
        """
        normalised = tuple(str(label) for label in labels)
        if not normalised:
            raise ValueError(f"Category '{name}' needs at least one label")

        seen = set()
        for label in normalised:
            if label in seen:
                raise DuplicateLabelError(
                    f"Label '{label}' appears twice in category '{name}'"
                )
            seen.add(label)

        return cls(name=str(name), labels=normalised)

    @property
    def size(self) -> int:
        return len(self.labels)

    def index_of(self, label: str) -> int:
        try:
            return self.labels.index(str(label))
        except ValueError:
            raise UnknownLabelError(
                f"Unknown label '{label}' in category '{self.name}' "
                f"(known: {', '.join(self.labels)})"
            ) from None

    def label_at(self, index: int) -> str:
        self.check_index(index)
        return self.labels[index]

    def check_index(self, index: int) -> None:
        """
        Raises:
            IndexOutOfRangeError: If index is not in 0..n-1
        """
        if isinstance(index, bool) or not isinstance(index, Integral):
            raise IndexOutOfRangeError(
                f"Index for category '{self.name}' must be an int, got {index!r}"
            )
        if index < 0 or index >= self.size:
            raise IndexOutOfRangeError(
                f"Index {index} out of range for category '{self.name}' "
                f"(valid: 0..{self.size - 1})"
            )

    def resolve(self, key: EntityKey) -> int:
        """
        Turn an index or a label into an index.

        Integers are always treated as indices, strings always as labels, so
        a numeric label such as "2013" must be passed as a string.
        """
        if isinstance(key, str):
            return self.index_of(key)
        self.check_index(key)
        return int(key)
