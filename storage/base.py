"""Abstract interfaces for the storage layer."""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised by key-value stores when the backing storage fails."""


class KeyValueStore(ABC):
    """Abstract interface for durable string key-value storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Read a value.

        Args:
            key: The storage key.

        Returns:
            The stored value, or None if the key is absent.

        Raises:
            StorageError: If the backing storage cannot be read.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Write a value, replacing any existing one.

        Args:
            key: The storage key.
            value: The value to store.

        Raises:
            StorageError: If the backing storage cannot be written.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error.

        Args:
            key: The storage key.

        Raises:
            StorageError: If the backing storage cannot be written.
        """
        pass

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with prefix, sorted.

        Args:
            prefix: Key prefix to filter on.

        Returns:
            Matching keys.
        """
        pass
