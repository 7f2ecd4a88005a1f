"""SQLite-backed key-value storage for the book collection."""

from __future__ import annotations

import os
import sqlite3
import time
from pathlib import Path

import structlog

from .errors import StorageError

log = structlog.get_logger()

DEFAULT_FILENAME = "bookshelf.db"


class KeyValueStorage:
    """Persist string values under string keys in a local SQLite database.

    The database is opened on first use, so an unreadable file surfaces as a
    StorageError from get_item/set_item rather than from the constructor.
    """

    def __init__(self, db_path: Path | None = None):
        if db_path is None:
            db_path = Path(os.environ.get("BOOKSHELF_DATA_DIR", ".data")) / DEFAULT_FILENAME

        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._closed = False

    def _connection(self) -> sqlite3.Connection:
        if self._closed:
            raise StorageError(f"Storage at {self.db_path} is closed")
        if self._conn is not None:
            return self._conn

        conn = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # Calls are serialized by the store but may run on a worker thread.
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            conn.execute(
                """CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL
                )"""
            )
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            raise StorageError(f"Cannot open storage at {self.db_path}: {e}") from e

        log.debug("storage_opened", path=str(self.db_path))
        self._conn = conn
        return conn

    def get_item(self, key: str) -> str | None:
        """Return the stored value or None when the key is absent."""
        conn = self._connection()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read {key!r}: {e}") from e

        if row is None:
            log.debug("storage_miss", key=key)
            return None
        return row[0]

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        conn = self._connection()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, time.time()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot write {key!r}: {e}") from e
        log.debug("storage_write", key=key, size=len(value))

    def remove_item(self, key: str) -> None:
        conn = self._connection()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot remove {key!r}: {e}") from e

    def close(self) -> None:
        self._closed = True
        if self._conn is not None:
            self._conn.close()
            self._conn = None
