"""In-memory key-value store, for tests and ephemeral sessions."""

from .base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed KeyValueStore. Contents are lost with the instance."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self._data if key.startswith(prefix))
