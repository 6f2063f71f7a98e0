"""Identity resolution: authenticated subject first, device id otherwise."""

from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from loguru import logger

from .store import JournalStore


@runtime_checkable
class SessionProvider(Protocol):
    """The auth boundary. Login and signup live outside the core.

    Providers that need network I/O to know their state also expose a
    blocking ``refresh()``; ``RemoteSync.refresh_session`` calls it off the
    event loop.
    """

    def current_user_id(self) -> str | None:
        """Return the subject id of the active session, or None. Must not block."""
        ...


class IdentityResolver:
    """Pick the identity that owns the data for this run.

    With an active session the session's subject wins. Otherwise a random
    device id is generated once, persisted, and reused on every later call.
    Storage failures propagate; the caller treats them as fatal at startup.
    """

    def __init__(self, store: JournalStore, session: SessionProvider | None = None) -> None:
        self.store = store
        self.session = session

    def session_user_id(self) -> str | None:
        if self.session is None:
            return None
        return self.session.current_user_id() or None

    def is_authenticated(self) -> bool:
        return self.session_user_id() is not None

    def resolve(self) -> str:
        user_id = self.session_user_id()
        if user_id:
            return user_id

        device_id = self.store.read_device_id()
        if device_id is None:
            device_id = str(uuid.uuid4())
            self.store.write_device_id(device_id)
            logger.info(f"Generated device id {device_id}")
        return device_id
