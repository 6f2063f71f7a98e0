"""
Remote sync adapter.

Best-effort mirror of the local profile and logs to a remote backend.  The
adapter never raises: every outcome comes back as a ``SyncResult`` so callers
can ignore failures today and add an outbox later without an interface change.

The backend itself is any object satisfying ``RemoteBackend``; it works in
rows (backend column names) and raises ``RemoteError`` subclasses on failure.
The field mapping between local models and rows lives here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from loguru import logger

from healthnote.core.circuit_breaker import CircuitBreaker
from healthnote.core.exceptions import RemoteRejectedError, RemoteUnreachableError, ValidationError

from .identity import SessionProvider
from .models import DailyLog, UserProfile

T = TypeVar("T")

PROFILES = "profiles"
LOGS = "logs"


class SyncResult(StrEnum):
    """Outcome of a remote call."""

    OK = "ok"
    UNREACHABLE = "unreachable"  # network error, timeout, open circuit
    REJECTED = "rejected"  # backend answered with an error
    DISABLED = "disabled"  # no backend configured or no active session


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    status: SyncResult
    value: T | None = None

    @property
    def ok(self) -> bool:
        return self.status == SyncResult.OK


@runtime_checkable
class RemoteBackend(Protocol):
    """Row-level access to the ``profiles`` and ``logs`` collections.

    Calls are blocking; the adapter runs them in a worker thread.
    """

    def select_profile(self, user_id: str) -> dict[str, Any] | None: ...

    def select_logs(self, user_id: str) -> list[dict[str, Any]]: ...

    def upsert_profile(self, row: dict[str, Any]) -> None: ...

    def insert_log(self, row: dict[str, Any]) -> None: ...

    def delete_profiles(self, user_id: str) -> None: ...

    def delete_logs(self, user_id: str) -> None: ...


# ── Field mapping ────────────────────────────────────────────────────


def profile_to_row(user_id: str, profile: UserProfile, updated_at: datetime | None = None) -> dict[str, Any]:
    updated_at = updated_at or datetime.now().astimezone()
    return {
        "user_id": user_id,
        "name": profile.name,
        "birth_date": profile.birth_date.isoformat(),
        "theme": profile.theme.value,
        "is_child_mode": profile.is_child_mode,
        "height": profile.height,
        "weight": profile.weight,
        "updated_at": updated_at.isoformat(),
    }


def row_to_profile(row: dict[str, Any]) -> UserProfile:
    try:
        return UserProfile.from_dict(
            {
                "name": row["name"],
                "birthDate": row["birth_date"],
                "theme": row.get("theme"),
                "isChildMode": row.get("is_child_mode", False),
                "height": row.get("height"),
                "weight": row.get("weight"),
            }
        )
    except KeyError as e:
        raise ValidationError(f"Profile row missing column {e}") from None


def log_to_row(user_id: str, log: DailyLog) -> dict[str, Any]:
    return {
        "id": log.id,
        "user_id": user_id,
        "date": log.date.isoformat(),
        "category": log.category.value,
        "value": log.value,
        "note": log.note,
        "sub_data": log.sub_data,
    }


def row_to_log(row: dict[str, Any]) -> DailyLog:
    return DailyLog.from_dict(
        {
            "id": row.get("id"),
            "date": row.get("date"),
            "category": row.get("category"),
            "value": row.get("value"),
            "note": row.get("note"),
            "subData": row.get("sub_data"),
        }
    )


# ── Adapter ──────────────────────────────────────────────────────────


class RemoteSync:
    """Session-gated, timeout-bounded access to a ``RemoteBackend``.

    Without a backend or an active session every call returns
    ``SyncResult.DISABLED`` and the backend is never touched.
    """

    def __init__(
        self,
        backend: RemoteBackend | None = None,
        session: SessionProvider | None = None,
        *,
        timeout: float = 10.0,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self.backend = backend
        self.session = session
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker()

    @property
    def configured(self) -> bool:
        return self.backend is not None and self.session is not None

    def is_active(self) -> bool:
        """True when a backend is configured and a session is signed in."""
        return self.configured and bool(self.session.current_user_id())

    async def refresh_session(self) -> None:
        """Let the session re-check its sign-in state, bounded by ``timeout``.

        Only sessions with a blocking ``refresh()`` take part.  On timeout or
        failure the session keeps whatever state it already had.
        """
        refresh = getattr(self.session, "refresh", None)
        if refresh is None:
            return
        try:
            await asyncio.wait_for(asyncio.to_thread(refresh), timeout=self.timeout)
        except TimeoutError:
            logger.warning(f"Session refresh timed out after {self.timeout}s; using cached sign-in state")
        except Exception as e:
            logger.opt(exception=e).warning(f"Session refresh failed: {e!r}")

    async def _call(self, collection: str, op: str, fn: Callable[..., Any], *args: Any) -> FetchResult[Any]:
        if not self.is_active():
            return FetchResult(SyncResult.DISABLED)
        if not self.breaker.is_available(collection):
            logger.debug(f"Skipping {op}: circuit open for {collection}")
            return FetchResult(SyncResult.UNREACHABLE)

        # A timed-out worker thread is abandoned, not cancelled; its result is discarded.
        try:
            value = await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.timeout)
        except (TimeoutError, RemoteUnreachableError, ConnectionError) as e:
            self.breaker.record(collection, success=False)
            logger.debug(f"Remote {op} unreachable: {e!r}")
            return FetchResult(SyncResult.UNREACHABLE)
        except (RemoteRejectedError, ValidationError) as e:
            logger.warning(f"Remote {op} rejected: {e}")
            return FetchResult(SyncResult.REJECTED)
        except Exception as e:
            logger.opt(exception=e).warning(f"Remote {op} failed unexpectedly: {e!r}")
            return FetchResult(SyncResult.REJECTED)

        self.breaker.record(collection, success=True)
        return FetchResult(SyncResult.OK, value)

    # -- Reads ---------------------------------------------------------------

    async def fetch_profile(self, identity: str) -> FetchResult[UserProfile]:
        """OK with ``value=None`` means the backend has no profile for *identity*."""

        def _fetch() -> UserProfile | None:
            row = self.backend.select_profile(identity)
            return row_to_profile(row) if row else None

        return await self._call(PROFILES, "fetch_profile", _fetch)

    async def fetch_logs(self, identity: str) -> FetchResult[list[DailyLog]]:
        def _fetch() -> list[DailyLog]:
            return [row_to_log(row) for row in self.backend.select_logs(identity) or []]

        return await self._call(LOGS, "fetch_logs", _fetch)

    # -- Writes --------------------------------------------------------------

    async def push_profile(self, identity: str, profile: UserProfile) -> SyncResult:
        row = profile_to_row(identity, profile)
        result = await self._call(PROFILES, "push_profile", lambda: self.backend.upsert_profile(row))
        return result.status

    async def push_log(self, identity: str, log: DailyLog) -> SyncResult:
        row = log_to_row(identity, log)
        result = await self._call(LOGS, "push_log", lambda: self.backend.insert_log(row))
        return result.status

    async def delete_all(self, identity: str) -> SyncResult:
        """Delete logs, then the profile. Reports the first non-OK outcome."""
        logs = await self._call(LOGS, "delete_logs", lambda: self.backend.delete_logs(identity))
        profiles = await self._call(PROFILES, "delete_profiles", lambda: self.backend.delete_profiles(identity))
        for status in (logs.status, profiles.status):
            if status != SyncResult.OK:
                return status
        return SyncResult.OK
