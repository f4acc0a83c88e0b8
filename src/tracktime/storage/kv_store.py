# src/tracktime/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the key-value store cannot read or write a value."""


class StorageFullError(StorageError):
    """Raised when a write would exceed the configured quota."""


class SqliteKVStore:
    """
    SQLite key-value blob store.

    One table, one row per key, value stored as TEXT. Writes replace the whole
    value (last write wins).

    Quota:
    - quota_bytes > 0 limits the UTF-8 size of the sum of all stored values
    - a write that would exceed it raises StorageFullError and leaves the old value

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tracktime.sqlite3", *, quota_bytes: int = 0) -> None:
        self._db_path = Path(db_path)
        self._quota_bytes = max(0, int(quota_bytes))
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteKVStore ready db=%s quota=%s", self._db_path, self._quota_bytes or "none")

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self._db_path}: {e}") from e
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row["value"])
        except sqlite3.Error as e:
            raise StorageError(f"read failed key={key}: {e}") from e
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self._db_path}: {e}") from e
        try:
            if self._quota_bytes:
                row = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(CAST(value AS BLOB))), 0) FROM kv WHERE key != ?",
                    (key,),
                ).fetchone()
                used = int(row[0])
                if used + size > self._quota_bytes:
                    raise StorageFullError(
                        f"quota exceeded key={key} size={size} used={used} quota={self._quota_bytes}"
                    )

            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
            logger.debug("kv set key=%s bytes=%d", key, size)
        except sqlite3.Error as e:
            raise StorageError(f"write failed key={key}: {e}") from e
        finally:
            conn.close()
