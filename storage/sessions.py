"""Session snapshot persistence.

SessionStore saves, loads and clears SessionSnapshot documents in a
KeyValueStore. Storage is a resumability cache, never the source of truth:
every storage or decoding failure is logged and reported as a miss (load)
or a no-op (save, clear). Nothing here raises into the session flow.
"""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from config import PersistenceConfig
from models import (
    SCHEMA_VERSION,
    AnswerRecord,
    SessionSnapshot,
    SessionStatus,
    utc_now,
)
from .base import KeyValueStore

logger = logging.getLogger(__name__)


class SessionStore:
    """Persists session snapshots keyed by (exercise_id, context)."""

    def __init__(
        self,
        store: KeyValueStore,
        config: PersistenceConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config or PersistenceConfig()
        self._clock = clock

    def key_for(self, exercise_id: str, context: str | None = None) -> str:
        """Build the storage key for a snapshot.

        The schema version is part of the key, so snapshots written by an
        incompatible engine are never even read.
        """
        context = context or self.config.default_context
        return f"{self.config.key_prefix}:{exercise_id}:{context}:{SCHEMA_VERSION}"

    def save(
        self,
        exercise_id: str,
        context: str | None,
        partial: SessionSnapshot | Mapping[str, Any] | None = None,
    ) -> SessionSnapshot | None:
        """Merge partial fields into the stored snapshot, creating it if needed.

        Args:
            exercise_id: The exercise the session belongs to.
            context: The lesson context (e.g. lesson slug); None means default.
            partial: Snapshot fields to update, as a mapping or a full snapshot.

        Returns:
            The snapshot as stored, or None if it could not be saved.
        """
        now = self._clock()
        fields: dict[str, Any] = {
            "status": SessionStatus.IN_PROGRESS,
            "started_at": now,
            "current_index": 0,
            "answers": [],
            "progress": {},
        }

        existing = self.load(exercise_id, context)
        if existing is not None:
            fields.update(existing.model_dump())

        if isinstance(partial, SessionSnapshot):
            fields.update(partial.model_dump())
        elif partial:
            fields.update(partial)

        fields.update(
            exercise_id=exercise_id,
            schema_version=SCHEMA_VERSION,
            last_updated_at=now,
        )

        key = self.key_for(exercise_id, context)
        try:
            snapshot = SessionSnapshot.model_validate(fields)
            self.store.set(key, snapshot.model_dump_json())
        except Exception:
            logger.warning("Failed to save exercise session %s", key, exc_info=True)
            return None
        return snapshot

    def load(self, exercise_id: str, context: str | None) -> SessionSnapshot | None:
        """Load a usable snapshot.

        Returns:
            The snapshot, or None when it is absent, unreadable, corrupt, or
            was written with a different schema version.
        """
        key = self.key_for(exercise_id, context)
        try:
            raw = self.store.get(key)
        except Exception:
            logger.warning("Failed to load exercise session %s", key, exc_info=True)
            return None

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding corrupt exercise session %s", key)
            return None

        if not isinstance(data, dict) or data.get("schema_version") != SCHEMA_VERSION:
            logger.warning("Exercise session %s version mismatch, starting fresh", key)
            return None

        try:
            return SessionSnapshot.model_validate(data)
        except ValueError:
            logger.warning("Discarding invalid exercise session %s", key, exc_info=True)
            return None

    def clear(self, exercise_id: str, context: str | None) -> None:
        """Remove a snapshot. Failures are logged and ignored."""
        key = self.key_for(exercise_id, context)
        try:
            self.store.delete(key)
        except Exception:
            logger.warning("Failed to clear exercise session %s", key, exc_info=True)

    def save_attempt(
        self, exercise_id: str, context: str | None, record: AnswerRecord
    ) -> SessionSnapshot | None:
        """Replace or append one answer record in an existing snapshot.

        Does nothing (returns None) when there is no usable snapshot.
        """
        snapshot = self.load(exercise_id, context)
        if snapshot is None:
            return None

        answers = [a for a in snapshot.answers if a.question_id != record.question_id]
        answers.append(record)
        return self.save(exercise_id, context, {"answers": answers})

    def get_attempt(
        self, exercise_id: str, context: str | None, question_id: str
    ) -> AnswerRecord | None:
        """Look up the stored answer record for one question."""
        snapshot = self.load(exercise_id, context)
        if snapshot is None:
            return None
        return snapshot.get_answer(question_id)

    def stored_keys(self) -> list[str]:
        """Keys of all stored snapshots for the current schema version."""
        try:
            keys = self.store.keys(f"{self.config.key_prefix}:")
        except Exception:
            logger.warning("Failed to list exercise sessions", exc_info=True)
            return []
        return [key for key in keys if key.endswith(f":{SCHEMA_VERSION}")]
