from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Union


class TransactionError(RuntimeError):
    """A write transaction could not be opened or committed."""


@dataclass(frozen=True)
class Record:
    id: int
    text: str
    subtext: str
    completed: bool = False
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Record:
        return cls(
            id=int(row["id"]),
            text=str(row["text"]),
            subtext=str(row["subtext"]),
            completed=bool(row["completed"]),
            created_at=str(row["created_at"]),
            updated_at=str(row["updated_at"]),
        )

    def same_content(self, other: Record) -> bool:
        return (
            self.text == other.text
            and self.subtext == other.subtext
            and self.completed == other.completed
        )


@dataclass(frozen=True)
class InitialChange:
    results: list[Record]


@dataclass(frozen=True)
class UpdateChange:
    """Diff between two snapshots of a result set.

    ``deletions`` index the previous snapshot; ``insertions`` and
    ``modifications`` index the new one. All three are sorted ascending.
    """

    results: list[Record]
    deletions: list[int] = field(default_factory=list)
    insertions: list[int] = field(default_factory=list)
    modifications: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.deletions or self.insertions or self.modifications)


@dataclass(frozen=True)
class ErrorChange:
    error: Exception


CollectionChange = Union[InitialChange, UpdateChange, ErrorChange]
