"""In-memory storage backend."""

import copy
from typing import Any

from .base import KeyValueStore, StorageKeyError


class MemoryStorage(KeyValueStore):
    """Dict-backed storage. Values are deep-copied in and out, like a real store."""

    def __init__(self, initial: dict[str, Any] | None = None, **config):
        super().__init__(**config)
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def save(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def load(self, key: str) -> Any:
        if key not in self._data:
            raise StorageKeyError(f"Key not found: {key}")
        return copy.deepcopy(self._data[key])

    def exists(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def keys(self) -> list[str]:
        return sorted(self._data)
