"""
Key-value storage backends for the content cache
"""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterator, Protocol


class StorageError(Exception):
    """Raised when the storage backend cannot complete an operation"""


class StorageQuotaExceeded(StorageError):
    """Raised when a write would push the store past its size quota"""


class KeyValueStore(Protocol):
    """Synchronous string key-value store. Writes may fail."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


def _size(value: str) -> int:
    return len(value.encode("utf-8"))


class MemoryStore:
    """In-process store, optionally bounded to `max_bytes` of values"""

    def __init__(self, max_bytes: int | None = None):
        self.max_bytes = max_bytes
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        if self.max_bytes is not None:
            current = self.used_bytes() - _size(self._data.get(key, ""))
            if current + _size(value) > self.max_bytes:
                raise StorageQuotaExceeded(
                    f"Storing {key!r} would exceed quota of {self.max_bytes} bytes"
                )
        self._data[key] = value
        return True

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def used_bytes(self) -> int:
        return sum(_size(value) for value in self._data.values())


class SqliteStore:
    """Store backed by a single SQLite table so snapshots survive restarts"""

    def __init__(self, db_path: Path | str, max_bytes: int | None = None):
        self.db_path = Path(db_path)
        self.max_bytes = max_bytes
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.execute(
                    "CREATE TABLE IF NOT EXISTS kv_store ("
                    " key TEXT PRIMARY KEY,"
                    " value TEXT NOT NULL"
                    ")"
                )
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open storage at {self.db_path}: {e}") from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self.db_path)) as conn:
            conn.execute("PRAGMA busy_timeout = 5000;")
            with conn:
                yield conn

    def get(self, key: str) -> str | None:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> bool:
        try:
            with self._connect() as conn:
                if self.max_bytes is not None:
                    (current,) = conn.execute(
                        "SELECT COALESCE(SUM(LENGTH(CAST(value AS BLOB))), 0)"
                        " FROM kv_store WHERE key != ?",
                        (key,),
                    ).fetchone()
                    if current + _size(value) > self.max_bytes:
                        raise StorageQuotaExceeded(
                            f"Storing {key!r} would exceed quota of {self.max_bytes} bytes"
                        )
                conn.execute(
                    "INSERT INTO kv_store (key, value) VALUES (?, ?)"
                    " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        return True

    def remove(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove {key!r}: {e}") from e

    def keys(self) -> list[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e
        return [row[0] for row in rows]
