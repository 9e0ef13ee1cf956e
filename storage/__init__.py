"""Storage layer for the exercise engine.

Provides the key-value store interface, in-memory and SQLite
implementations, and the SessionStore that persists session snapshots on
top of any of them.
"""

from pathlib import Path

from config import PersistenceConfig
from .base import KeyValueStore, StorageError
from .memory import InMemoryKeyValueStore
from .sqlite import SQLiteKeyValueStore
from .sessions import SessionStore
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interfaces
    "KeyValueStore",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
    # Snapshot persistence
    "SessionStore",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_kv_store",
    "get_session_store",
]


def get_kv_store(db_path: Path = DEFAULT_DB_PATH) -> KeyValueStore:
    """Get a SQLite-backed KeyValueStore, creating the schema if needed."""
    init_schema(db_path)
    return SQLiteKeyValueStore(db_path)


def get_session_store(
    db_path: Path = DEFAULT_DB_PATH,
    config: PersistenceConfig | None = None,
) -> SessionStore:
    """Get a SessionStore persisting to the SQLite database at db_path."""
    return SessionStore(get_kv_store(db_path), config)
