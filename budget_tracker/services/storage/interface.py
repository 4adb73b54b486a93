"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep state in a JSON file for everyday local use
2. Use in-memory storage for testing
3. Swap in a different keyed store later without touching the stores

The interface is intentionally tiny - a keyed string store, nothing more.
Each key holds one whole JSON document (the user list, the session,
one user's transactions). Writes always replace the whole value.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional


class KeyValueStore(ABC):
    """
    Abstract interface for durable keyed string storage.

    Any storage implementation (memory, JSON file, ...) must
    implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is a no-op.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over every stored key."""
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageWriteError(StorageError):
    """The backing medium rejected a write."""
    pass
