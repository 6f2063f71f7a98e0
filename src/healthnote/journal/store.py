"""JournalStore: the on-device copy of one identity's profile and logs.

Sits on top of any ``KeyValueStore``. The local store is authoritative for
reads; the remote mirror only ever refreshes it.
"""

from __future__ import annotations

import threading

from loguru import logger

from healthnote.core.storage import KeyValueStore, StorageError

from .models import DailyLog, UserProfile

USER_KEY = "healthnote_user"
LOGS_KEY = "healthnote_logs"
DEVICE_ID_KEY = "healthnote_uuid"


class JournalStore:
    """Synchronous, thread-safe access to the profile and the log collection.

    ``append_log`` holds a lock across read-modify-write, so two concurrent
    appends both land instead of the later overwrite clobbering the earlier.
    """

    def __init__(self, backend: KeyValueStore) -> None:
        self.backend = backend
        self._lock = threading.RLock()

    # -- Profile -------------------------------------------------------------

    def read_profile(self) -> UserProfile | None:
        data = self.backend.get(USER_KEY)
        if data is None:
            return None
        return UserProfile.from_dict(data)

    def write_profile(self, profile: UserProfile) -> None:
        with self._lock:
            self.backend.save(USER_KEY, profile.to_dict())

    # -- Logs ----------------------------------------------------------------

    def read_logs(self) -> list[DailyLog]:
        """Return all logs in insertion order, oldest first."""
        data = self.backend.get(LOGS_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(f"Stored '{LOGS_KEY}' is not a list")
        return [DailyLog.from_dict(item) for item in data]

    def write_logs(self, logs: list[DailyLog]) -> None:
        """Replace the whole collection."""
        with self._lock:
            self.backend.save(LOGS_KEY, [log.to_dict() for log in logs])

    def append_log(self, log: DailyLog) -> list[DailyLog]:
        """Append one saved log and return the full updated collection."""
        if not log.has_id:
            raise ValueError("Only logs with an id can be stored")
        with self._lock:
            logs = self.read_logs()
            if any(existing.id == log.id for existing in logs):
                raise ValueError(f"Duplicate log id: {log.id}")
            logs.append(log)
            self.write_logs(logs)
        return logs

    # -- Device identity -----------------------------------------------------

    def read_device_id(self) -> str | None:
        value = self.backend.get(DEVICE_ID_KEY)
        return value if isinstance(value, str) and value else None

    def write_device_id(self, device_id: str) -> None:
        self.backend.save(DEVICE_ID_KEY, device_id)

    # -- Housekeeping --------------------------------------------------------

    def clear(self) -> None:
        """Delete profile and logs. The device id survives."""
        with self._lock:
            self.backend.delete(USER_KEY)
            self.backend.delete(LOGS_KEY)
        logger.info("Cleared local profile and logs")
