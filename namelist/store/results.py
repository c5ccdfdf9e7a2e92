from __future__ import annotations

import difflib
import logging
import sqlite3
from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, overload

from .filters import Predicate
from .types import CollectionChange, ErrorChange, InitialChange, Record, UpdateChange

if TYPE_CHECKING:
    from ._store import NameStore

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[CollectionChange], None]


def compute_changes(old: Sequence[Record], new: Sequence[Record]) -> UpdateChange:
    """Diff two snapshots by record identity.

    Records kept in place (part of the longest matching id run) are reported
    as modifications when their content changed; anything that moved is a
    deletion plus an insertion.
    """

    old_ids = [record.id for record in old]
    new_ids = [record.id for record in new]
    matcher = difflib.SequenceMatcher(None, old_ids, new_ids, autojunk=False)
    deletions: list[int] = []
    insertions: list[int] = []
    modifications: list[int] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for offset in range(i2 - i1):
                if not old[i1 + offset].same_content(new[j1 + offset]):
                    modifications.append(j1 + offset)
            continue
        deletions.extend(range(i1, i2))
        insertions.extend(range(j1, j2))
    return UpdateChange(
        results=list(new),
        deletions=deletions,
        insertions=insertions,
        modifications=modifications,
    )


class NotificationToken:
    def __init__(self, results: ResultSet, callback: ChangeCallback) -> None:
        self._results = results
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def invalidate(self) -> None:
        if not self._active:
            return
        self._active = False
        self._results._remove_token(self)


class ResultSet:
    """Live, sorted view over the records matching a predicate.

    The store refreshes every live result set after each committed write and
    hands the diff to whoever is observing it.
    """

    def __init__(
        self,
        store: NameStore,
        predicate: Predicate | None,
        *,
        sort_key: str = "text",
        ascending: bool = True,
    ) -> None:
        self._store = store
        self.predicate = predicate
        self.sort_key = sort_key
        self.ascending = ascending
        self._tokens: list[NotificationToken] = []
        self._rows: list[Record] = store._fetch(predicate, sort_key=sort_key, ascending=ascending)

    def __len__(self) -> int:
        return len(self._rows)

    @overload
    def __getitem__(self, index: int) -> Record: ...

    @overload
    def __getitem__(self, index: slice) -> list[Record]: ...

    def __getitem__(self, index: int | slice) -> Record | list[Record]:
        return self._rows[index]

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._rows))

    def snapshot(self) -> list[Record]:
        return list(self._rows)

    @property
    def observed(self) -> bool:
        return bool(self._tokens)

    def observe(self, callback: ChangeCallback) -> NotificationToken:
        token = NotificationToken(self, callback)
        self._tokens.append(token)
        self._store._track_observed(self)
        self._deliver_to(token, InitialChange(results=self.snapshot()))
        return token

    def _remove_token(self, token: NotificationToken) -> None:
        if token in self._tokens:
            self._tokens.remove(token)
        if not self._tokens:
            self._store._untrack_observed(self)

    def _invalidate_all(self) -> None:
        for token in list(self._tokens):
            token.invalidate()

    def _refresh(self) -> None:
        try:
            rows = self._store._fetch(
                self.predicate, sort_key=self.sort_key, ascending=self.ascending
            )
        except sqlite3.Error as exc:
            logger.warning("result set refresh failed", exc_info=exc)
            self._deliver(ErrorChange(error=exc))
            return
        change = compute_changes(self._rows, rows)
        self._rows = rows
        if change.is_empty:
            return
        logger.debug(
            "result set changed: -%d +%d ~%d",
            len(change.deletions),
            len(change.insertions),
            len(change.modifications),
        )
        self._deliver(change)

    def _deliver(self, change: CollectionChange) -> None:
        for token in list(self._tokens):
            self._deliver_to(token, change)

    def _deliver_to(self, token: NotificationToken, change: CollectionChange) -> None:
        if not token.active:
            return
        try:
            token.callback(change)
        except Exception:
            logger.exception("change observer failed")
