from __future__ import annotations

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".namelist.sqlite"

FOLD_FUNCTION = "nl_fold"


def _fold(value: object) -> str | None:
    if value is None:
        return None
    return str(value).casefold()


def connect(db_path: Path | str, check_same_thread: bool = True) -> sqlite3.Connection:
    path = Path(db_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode = WAL")
    except sqlite3.OperationalError:
        conn.execute("PRAGMA journal_mode = DELETE")
    conn.execute("PRAGMA synchronous = NORMAL")
    # SQLite's lower() only folds ASCII; predicates compare through this instead.
    conn.create_function(FOLD_FUNCTION, 1, _fold, deterministic=True)
    return conn


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS names (
            id INTEGER PRIMARY KEY,
            text TEXT NOT NULL DEFAULT '',
            subtext TEXT NOT NULL DEFAULT '',
            completed INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_names_text ON names(text, id);
        """
    )
    conn.commit()
