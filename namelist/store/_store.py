from __future__ import annotations

import datetime as dt
import logging
import sqlite3
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .. import db
from .filters import Predicate
from .results import ResultSet
from .types import Record, TransactionError

logger = logging.getLogger(__name__)

SORT_KEYS = ("text", "subtext", "id", "created_at", "updated_at")


class WriteTransaction:
    """Mutations allowed inside ``NameStore.write()``."""

    def __init__(self, store: NameStore) -> None:
        self._store = store
        self.changed = 0

    def add(self, text: str, subtext: str, *, completed: bool = False) -> Record:
        now = self._store._now_iso()
        cur = self._store.conn.execute(
            """
            INSERT INTO names(text, subtext, completed, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (text, subtext, 1 if completed else 0, now, now),
        )
        self.changed += 1
        record_id = cur.lastrowid
        if record_id is None:
            raise TransactionError("insert did not return a record id")
        return Record(
            id=int(record_id),
            text=text,
            subtext=subtext,
            completed=completed,
            created_at=now,
            updated_at=now,
        )

    def update(
        self,
        record_id: int,
        *,
        text: str | None = None,
        subtext: str | None = None,
        completed: bool | None = None,
    ) -> Record:
        current = self._store.get(record_id)
        if current is None:
            raise TransactionError(f"record {record_id} no longer exists")
        updated = Record(
            id=current.id,
            text=current.text if text is None else text,
            subtext=current.subtext if subtext is None else subtext,
            completed=current.completed if completed is None else completed,
            created_at=current.created_at,
            updated_at=self._store._now_iso(),
        )
        self._store.conn.execute(
            "UPDATE names SET text = ?, subtext = ?, completed = ?, updated_at = ? WHERE id = ?",
            (
                updated.text,
                updated.subtext,
                1 if updated.completed else 0,
                updated.updated_at,
                record_id,
            ),
        )
        self.changed += 1
        return updated

    def delete(self, record_id: int) -> None:
        cur = self._store.conn.execute("DELETE FROM names WHERE id = ?", (record_id,))
        if cur.rowcount == 0:
            raise TransactionError(f"record {record_id} no longer exists")
        self.changed += 1


class NameStore:
    def __init__(
        self,
        db_path: Path | str = db.DEFAULT_DB_PATH,
        *,
        check_same_thread: bool = True,
    ):
        self.db_path = Path(db_path).expanduser()
        self.conn = db.connect(self.db_path, check_same_thread=check_same_thread)
        db.initialize_schema(self.conn)
        self._in_write = False
        self._live: weakref.WeakSet[ResultSet] = weakref.WeakSet()
        # Observed result sets stay alive as long as someone holds a token.
        self._observed: list[ResultSet] = []

    @staticmethod
    def _now_iso() -> str:
        return dt.datetime.now(dt.UTC).isoformat()

    @property
    def in_write_transaction(self) -> bool:
        return self._in_write

    def close(self) -> None:
        for results in list(self._observed):
            results._invalidate_all()
        self.conn.close()

    def get(self, record_id: int) -> Record | None:
        row = self.conn.execute("SELECT * FROM names WHERE id = ?", (record_id,)).fetchone()
        if row is None:
            return None
        return Record.from_row(row)

    def count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) AS total FROM names").fetchone()
        return int(row["total"]) if row else 0

    def query(
        self,
        predicate: Predicate | None = None,
        *,
        sort_key: str = "text",
        ascending: bool = True,
    ) -> ResultSet:
        if sort_key not in SORT_KEYS:
            raise ValueError(f"unknown sort key: {sort_key}")
        results = ResultSet(self, predicate, sort_key=sort_key, ascending=ascending)
        self._live.add(results)
        return results

    def _fetch(
        self, predicate: Predicate | None, *, sort_key: str, ascending: bool
    ) -> list[Record]:
        direction = "ASC" if ascending else "DESC"
        sql = "SELECT * FROM names"
        params: list[object] = []
        if predicate is not None:
            clause, params = predicate.to_sql()
            sql += f" WHERE {clause}"
        sql += f" ORDER BY {sort_key} {direction}, id ASC"
        rows = self.conn.execute(sql, params).fetchall()
        return [Record.from_row(row) for row in rows]

    def _track_observed(self, results: ResultSet) -> None:
        if results not in self._observed:
            self._observed.append(results)

    def _untrack_observed(self, results: ResultSet) -> None:
        if results in self._observed:
            self._observed.remove(results)

    @contextmanager
    def write(self) -> Iterator[WriteTransaction]:
        """Run a block of mutations atomically.

        Commits on normal exit and rolls back on every other path. Observers
        are notified only after a successful commit.
        """

        if self._in_write:
            raise TransactionError("cannot begin a write transaction inside another one")
        self._in_write = True
        txn = WriteTransaction(self)
        try:
            try:
                yield txn
                self.conn.commit()
            except sqlite3.Error as exc:
                self.conn.rollback()
                raise TransactionError(f"write failed: {exc}") from exc
            except BaseException:
                self.conn.rollback()
                raise
        finally:
            self._in_write = False
        logger.debug("write committed (%d changes)", txn.changed)
        if txn.changed:
            self._notify()

    def _notify(self) -> None:
        for results in list(self._live):
            results._refresh()

    def add(self, text: str, subtext: str) -> Record:
        with self.write() as txn:
            return txn.add(text, subtext)

    def update(self, record_id: int, *, text: str, subtext: str) -> Record:
        with self.write() as txn:
            return txn.update(record_id, text=text, subtext=subtext)

    def delete(self, record_id: int) -> None:
        with self.write() as txn:
            txn.delete(record_id)
