# src/cache/sqlite_store.py — v2
"""SQLite-based store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Suited to a long-lived
single-host process that wants the cache to survive restarts.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from searchlens.cache.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteKeyValueStore(BaseKeyValueStore):
    """SQLite-backed key-value table."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> str | None:
        cursor = self._conn.execute(
            "SELECT value FROM cache_entries WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        return None if row is None else row[0]

    async def set(self, key: str, value: str) -> None:
        """Store a value (upsert)."""
        self._conn.execute(
            """INSERT OR REPLACE INTO cache_entries (key, value, updated_at)
               VALUES (?, ?, CURRENT_TIMESTAMP)""",
            (key, value),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
        self._conn.commit()

    async def clear(self) -> None:
        self._conn.execute("DELETE FROM cache_entries")
        self._conn.commit()

    async def keys(self) -> list[str]:
        cursor = self._conn.execute("SELECT key FROM cache_entries")
        return [row[0] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
