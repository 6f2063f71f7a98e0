"""
Local filesystem storage backend.

Each key is one JSON file under ``base_path``.  Writes go to a temp file in
the same directory and are moved into place with ``os.replace``, so a crash
leaves either the old or the new value, never a truncated one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from .base import KeyValueStore, StorageError, StorageKeyError, StoragePermissionError


class LocalStorage(KeyValueStore):
    """Local filesystem storage backend."""

    def __init__(self, base_path: str = "~/.healthnote-data/store", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot create storage directory {self.base_path}: {e}") from e

    def _get_full_path(self, key: str) -> Path:
        """Resolve a storage key to an absolute path under ``base_path``.

        Rejects unsafe keys (absolute paths, traversal, empty keys, and
        backslash-delimited paths) to prevent writes outside ``base_path``.
        """
        raw_key = key.strip()
        if not raw_key:
            raise StoragePermissionError("Storage key cannot be empty.")
        if "\x00" in raw_key:
            raise StoragePermissionError("Storage key cannot contain null bytes.")
        if "\\" in raw_key:
            raise StoragePermissionError("Storage key cannot contain backslashes. Use '/' separators.")

        key_path = Path(raw_key + ".json")
        if key_path.is_absolute() or raw_key.startswith("~"):
            raise StoragePermissionError(f"Unsafe storage key '{key}': absolute paths are not allowed.")

        full_path = (self.base_path / key_path).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoragePermissionError(f"Unsafe storage key '{key}': path traversal is not allowed.") from e
        return full_path

    def save(self, key: str, value: Any) -> None:
        path = self._get_full_path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-serializable: {e}") from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Saved {key} ({len(payload)} bytes)")

    def load(self, key: str) -> Any:
        path = self._get_full_path(key)
        if not path.exists():
            raise StorageKeyError(f"Key not found: {key}")

        try:
            text = path.read_text(encoding="utf-8")
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt JSON in {path}: {e}") from e

    def exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()

    def delete(self, key: str) -> bool:
        path = self._get_full_path(key)
        if not path.exists():
            return False
        try:
            path.unlink()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot delete {path}: {e}") from e
        return True
