"""Supabase remote backend and session.

Two tables, ``profiles`` (one row per ``user_id``, upserted) and ``logs``
(one row per log ``id``, inserted).  Library errors are translated into
``RemoteUnreachableError`` / ``RemoteRejectedError`` so the sync adapter can
classify them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from loguru import logger
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import AuthError, Client, ClientOptions, create_client

from healthnote.core.config_schema import SupabaseConfig
from healthnote.core.exceptions import ConfigurationError, RemoteRejectedError, RemoteUnreachableError
from healthnote.core.storage import KeyValueStore

T = TypeVar("T")

PROFILES_TABLE = "profiles"
LOGS_TABLE = "logs"


def _translate(fn: Callable[[], T]) -> T:
    try:
        return fn()
    except httpx.TimeoutException as e:
        raise RemoteUnreachableError(f"Supabase request timed out: {e}") from e
    except httpx.TransportError as e:
        raise RemoteUnreachableError(f"Supabase unreachable: {e}") from e
    except PostgrestAPIError as e:
        raise RemoteRejectedError(f"Supabase rejected request: {e.message or e}") from e
    except httpx.HTTPStatusError as e:
        raise RemoteRejectedError(f"Supabase HTTP {e.response.status_code}") from e
    except AuthError as e:
        raise RemoteRejectedError(f"Supabase auth error: {e}") from e


class KeyValueSessionStorage:
    """Persists the Supabase auth session in a ``KeyValueStore``.

    Lets a signed-in session survive between CLI invocations.
    """

    def __init__(self, backend: KeyValueStore, prefix: str = "supabase_session") -> None:
        self.backend = backend
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}/{key.replace('/', '_')}"

    def get_item(self, key: str) -> str | None:
        return self.backend.get(self._key(key))

    def set_item(self, key: str, value: str) -> None:
        self.backend.save(self._key(key), value)

    def remove_item(self, key: str) -> None:
        self.backend.delete(self._key(key))


def make_client(settings: SupabaseConfig, session_store: KeyValueStore | None = None) -> Client:
    if not settings.enabled:
        raise ConfigurationError("Supabase URL and anon key are required")
    if session_store is None:
        return create_client(settings.url, settings.anon_key)
    options = ClientOptions(storage=KeyValueSessionStorage(session_store), persist_session=True)
    return create_client(settings.url, settings.anon_key, options=options)


class SupabaseBackend:
    """``RemoteBackend`` over the Supabase PostgREST API."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def select_profile(self, user_id: str) -> dict[str, Any] | None:
        response = _translate(
            lambda: self.client.table(PROFILES_TABLE).select("*").eq("user_id", user_id).limit(1).execute()
        )
        if not response.data:
            return None
        return response.data[0]

    def select_logs(self, user_id: str) -> list[dict[str, Any]]:
        response = _translate(lambda: self.client.table(LOGS_TABLE).select("*").eq("user_id", user_id).execute())
        return list(response.data or [])

    def upsert_profile(self, row: dict[str, Any]) -> None:
        _translate(lambda: self.client.table(PROFILES_TABLE).upsert(row, on_conflict="user_id").execute())

    def insert_log(self, row: dict[str, Any]) -> None:
        _translate(lambda: self.client.table(LOGS_TABLE).insert(row).execute())

    def delete_profiles(self, user_id: str) -> None:
        _translate(lambda: self.client.table(PROFILES_TABLE).delete().eq("user_id", user_id).execute())

    def delete_logs(self, user_id: str) -> None:
        _translate(lambda: self.client.table(LOGS_TABLE).delete().eq("user_id", user_id).execute())


class SupabaseSession:
    """``SessionProvider`` backed by Supabase auth.

    ``current_user_id`` answers from the last known state and never touches
    the network.  ``refresh`` re-reads the stored session and may refresh an
    expired token over HTTP, so it is blocking; ``RemoteSync.refresh_session``
    runs it in a worker thread under the sync timeout.
    """

    def __init__(self, client: Client) -> None:
        self.client = client
        self._user_id: str | None = None

    def current_user_id(self) -> str | None:
        return self._user_id

    def refresh(self) -> str | None:
        try:
            session = self.client.auth.get_session()
        except (AuthError, httpx.HTTPError) as e:
            # An expired session that cannot refresh is the same as no session
            logger.debug(f"No usable Supabase session: {e}")
            session = None
        self._user_id = session.user.id if session is not None and session.user is not None else None
        return self._user_id

    def sign_in(self, email: str, password: str) -> str:
        """Password sign-in. Returns the user id; raises RemoteRejectedError on bad credentials."""
        response = _translate(lambda: self.client.auth.sign_in_with_password({"email": email, "password": password}))
        if response.user is None:
            raise RemoteRejectedError("Sign-in returned no user")
        self._user_id = response.user.id
        logger.info(f"Signed in as {response.user.id}")
        return response.user.id

    def sign_up(self, email: str, password: str) -> str | None:
        """Create an account. Returns None when email confirmation is pending."""
        response = _translate(lambda: self.client.auth.sign_up({"email": email, "password": password}))
        if response.user is None or response.session is None:
            return None
        self._user_id = response.user.id
        return self._user_id

    def sign_out(self) -> None:
        self._user_id = None
        _translate(lambda: self.client.auth.sign_out())
