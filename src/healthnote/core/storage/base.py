"""
Abstract base class for key-value storage backends.

Values are JSON-serializable Python objects.  Every operation is synchronous
and either applies completely or raises; there is no partial write.
"""

from abc import ABC, abstractmethod
from typing import Any

from healthnote.core.exceptions import HealthNoteError


class KeyValueStore(ABC):
    """Abstract base class for storage backends."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Persist *value* under *key*, replacing any previous value."""

    @abstractmethod
    def load(self, key: str) -> Any:
        """Load a value. Raises StorageKeyError if not found."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if a key exists in storage."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if deleted, False if it didn't exist."""

    def get(self, key: str, default: Any = None) -> Any:
        """Load a value, returning *default* when the key is absent."""
        try:
            return self.load(key)
        except StorageKeyError:
            return default


class StorageError(HealthNoteError):
    """Base exception for storage errors."""


class StorageKeyError(StorageError, KeyError):
    """Raised when a storage key doesn't exist."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""
