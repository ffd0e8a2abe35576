"""Canonical form for "one value or many" arguments."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class Shape(enum.Enum):
    """Which form the caller supplied."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"


@dataclass(frozen=True, slots=True)
class Items:
    """Ordered values of a string-or-array field.

    ``shape`` records the original form so responses can report a
    count when several items were given. Order is preserved and
    duplicates are kept.
    """

    values: tuple[str, ...]
    shape: Shape

    @property
    def is_sequence(self) -> bool:
        return self.shape is Shape.SEQUENCE

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


def normalize(value: str | Sequence[str]) -> Items:
    """Wrap a scalar into a one-element sequence, keep sequences as-is."""
    if isinstance(value, str):
        return Items(values=(value,), shape=Shape.SCALAR)
    return Items(values=tuple(value), shape=Shape.SEQUENCE)
