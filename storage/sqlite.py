"""SQLite implementation of the key-value store interface."""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from .base import KeyValueStore, StorageError
from .connection import get_connection, DEFAULT_DB_PATH


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite implementation of KeyValueStore.

    Opens a short-lived connection per call. Any sqlite3 failure is
    re-raised as StorageError.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get(self, key: str) -> str | None:
        """Read a value."""
        try:
            conn = get_connection(self.db_path)
            try:
                cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
                row = cursor.fetchone()
                return row["value"] if row else None
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """Write a value, replacing any existing one."""
        try:
            conn = get_connection(self.db_path)
            try:
                # Use INSERT OR REPLACE for upsert behavior
                conn.execute(
                    """INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)""",
                    (key, value, datetime.now(timezone.utc).isoformat()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> None:
        """Remove a key."""
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with prefix."""
        try:
            conn = get_connection(self.db_path)
            try:
                cursor = conn.execute(
                    """SELECT key FROM kv_store
                    WHERE substr(key, 1, ?) = ? ORDER BY key""",
                    (len(prefix), prefix),
                )
                return [row["key"] for row in cursor.fetchall()]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e
