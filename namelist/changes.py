from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from .store.types import UpdateChange

T = TypeVar("T")


def apply_changes(rows: Sequence[T], change: UpdateChange, values: Sequence[T]) -> list[T]:
    """Apply a diff to ``rows`` and return the updated list.

    Deletions are removed against the old indices from the back, so earlier
    indices stay valid. Insertions are then placed at their new indices from
    the front, which leaves every earlier row in its final position.
    Modifications finally replace rows in place at new indices. ``values`` is
    the new snapshot the insertions and modifications are read from.
    """

    updated = list(rows)
    for index in sorted(change.deletions, reverse=True):
        if not 0 <= index < len(updated):
            raise ValueError(f"deletion index {index} out of range")
        del updated[index]
    for index in sorted(change.insertions):
        if not 0 <= index <= len(updated) or index >= len(values):
            raise ValueError(f"insertion index {index} out of range")
        updated.insert(index, values[index])
    if len(updated) != len(values):
        raise ValueError(
            f"diff does not match snapshot: {len(updated)} rows, expected {len(values)}"
        )
    for index in change.modifications:
        if not 0 <= index < len(updated):
            raise ValueError(f"modification index {index} out of range")
        updated[index] = values[index]
    return updated
