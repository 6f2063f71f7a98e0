"""
Write pipeline: the optimistic-write contract.

Every operation applies to the local store first and returns as soon as the
local write is done.  The matching remote write is launched as a background
task whose outcome is logged and otherwise discarded.  Local failures
propagate to the caller; remote failures never do.

State that the UI used to keep in ambient globals is carried explicitly in
``AppState``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .identity import IdentityResolver
from .models import Category, DailyLog, UserProfile
from .remote import RemoteSync, SyncResult
from .store import JournalStore


@dataclass
class AppState:
    """What the UI renders: who, their profile, their logs.

    ``profile is None`` means onboarding has to run.
    """

    identity: str
    profile: UserProfile | None = None
    logs: list[DailyLog] = field(default_factory=list)
    authenticated: bool = False

    @property
    def needs_onboarding(self) -> bool:
        return self.profile is None


class JournalPipeline:
    """Orchestrates local-first writes and the startup fetch.

    Example::

        pipeline = JournalPipeline(store, RemoteSync(backend, session), IdentityResolver(store, session))
        state = await pipeline.load()
        logs = await pipeline.add_log(DailyLog(date=today, category="mood", value=4))
        await pipeline.drain()   # on shutdown
    """

    def __init__(
        self,
        store: JournalStore,
        remote: RemoteSync | None = None,
        identity: IdentityResolver | None = None,
    ) -> None:
        self.store = store
        self.remote = remote or RemoteSync()
        self.identity = identity or IdentityResolver(store, self.remote.session)
        self._pending: set[asyncio.Task] = set()

    # -- Background remote writes -------------------------------------------

    def _spawn(self, op: str, coro: Coroutine[Any, Any, SyncResult]) -> asyncio.Task | None:
        """Launch a remote write without awaiting it."""
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            logger.debug(f"No running event loop; skipped remote {op}")
            return None

        self._pending.add(task)
        task.add_done_callback(lambda t: self._finish(op, t))
        return task

    def _finish(self, op: str, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.debug(f"Remote {op} cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error(f"Remote {op} crashed")
            return
        result = task.result()
        if result not in (SyncResult.OK, SyncResult.DISABLED):
            # No outbox: this write stays missing remotely until the data is written again online
            logger.info(f"Remote {op} not mirrored ({result})")

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every in-flight remote write to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -- Startup -------------------------------------------------------------

    async def load(self) -> AppState:
        """Establish identity and the in-memory state.

        With a session, the remote copy is authoritative: a successful fetch
        overwrites the local cache, and a missing or unreachable remote profile
        means onboarding, whatever the local cache holds.  Without a session the
        local store is used as-is.
        """
        await self.remote.refresh_session()
        identity = self.identity.resolve()

        if not self.remote.is_active():
            return AppState(
                identity=identity,
                profile=self.store.read_profile(),
                logs=self.store.read_logs(),
                authenticated=False,
            )

        profile_result, logs_result = await asyncio.gather(
            self.remote.fetch_profile(identity),
            self.remote.fetch_logs(identity),
        )

        profile = profile_result.value if profile_result.ok else None
        if profile is not None:
            self.store.write_profile(profile)
        else:
            logger.info(f"No remote profile for {identity} ({profile_result.status}); onboarding required")

        if logs_result.ok:
            logs = logs_result.value or []
            self.store.write_logs(logs)
        else:
            logger.info(f"Remote logs unavailable ({logs_result.status}); using local cache")
            logs = self.store.read_logs()

        return AppState(identity=identity, profile=profile, logs=logs, authenticated=True)

    # -- Writes --------------------------------------------------------------

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        """Write locally, then mirror in the background."""
        self.store.write_profile(profile)
        if self.remote.is_active():
            self._spawn("push_profile", self.remote.push_profile(self.identity.resolve(), profile))
        return profile

    async def add_log(self, log: DailyLog) -> list[DailyLog]:
        """Save a new log and return the full local collection.

        Locally the collection is rewritten in full; remotely only the new
        entry is inserted.  A body log with measurements also refreshes the
        stored profile's height and weight.
        """
        if not log.has_id:
            log = log.with_id()

        # Computed before the append: a bad measurement must fail with nothing written
        refreshed = None
        if log.category == Category.BODY and log.sub_data:
            profile = self.store.read_profile()
            if profile is not None:
                refreshed = profile.with_body_measures(log.body_height, log.body_weight)
            else:
                logger.debug("Body log saved before onboarding; no profile to refresh")

        logs = self.store.append_log(log)

        if self.remote.is_active():
            self._spawn("push_log", self.remote.push_log(self.identity.resolve(), log))

        if refreshed is not None:
            await self.save_profile(refreshed)

        return logs

    async def clear_data(self) -> None:
        """Remove profile and logs locally, and request remote deletion."""
        await self.remote.refresh_session()
        identity = self.identity.resolve()
        self.store.clear()
        if self.remote.is_active():
            self._spawn("delete_all", self.remote.delete_all(identity))

    async def sign_out(self) -> None:
        """Drop the cached copy and end the session.

        Remote data is kept; it comes back on the next sign-in.
        """
        await self.drain()
        self.store.clear()
        session = self.remote.session
        if session is not None and hasattr(session, "sign_out"):
            session.sign_out()
