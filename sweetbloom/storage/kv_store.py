# sweetbloom/storage/kv_store.py

"""SQLite-backed key-value store for small persisted client state."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from sweetbloom.config.settings import Settings

logger = logging.getLogger("sweetbloom.storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class KeyValueStore:
    """String keys to string values, persisted across restarts."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.STORAGE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        # Calls arrive from asyncio.to_thread workers
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("KeyValueStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def get(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM kv WHERE key = ?", (key,),
        ).fetchone()
        return str(row[0]) if row else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET "
            "value=excluded.value, updated_at=excluded.updated_at",
            (key, value, datetime.now().isoformat()),
        )
        self._conn.commit()

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if it existed."""
        cur = self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        self._conn.commit()
        return cur.rowcount > 0
