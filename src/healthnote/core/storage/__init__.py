"""
Key-value storage backends for healthnote.

Synchronous JSON persistence with a pluggable backend interface
(local filesystem by default, in-memory for tests and throwaway sessions).
"""

from .base import (
    KeyValueStore,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
)
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = [
    "KeyValueStore",
    "LocalStorage",
    "MemoryStorage",
    "StorageError",
    "StorageKeyError",
    "StoragePermissionError",
]
