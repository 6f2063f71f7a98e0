"""Shared setup logic for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass

import click

from healthnote.core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from healthnote.core.config import load_settings
from healthnote.core.config_schema import HealthNoteConfig
from healthnote.core.exceptions import ConfigurationError
from healthnote.core.storage import LocalStorage
from healthnote.core.utils import setup_logging
from healthnote.journal import IdentityResolver, JournalPipeline, JournalStore, RemoteSync


@dataclass
class AppContext:
    """Everything a command needs, built once per invocation."""

    settings: HealthNoteConfig
    store: JournalStore
    pipeline: JournalPipeline
    session: object | None = None

    @property
    def remote_enabled(self) -> bool:
        return self.session is not None


def build_context(settings: HealthNoteConfig) -> AppContext:
    """Wire storage, the optional Supabase mirror and the pipeline from settings."""
    setup_logging(settings.logging.level, str(settings.paths.log_dir))

    backend = LocalStorage(base_path=str(settings.paths.store_dir))
    store = JournalStore(backend)

    remote_backend = None
    session = None
    if settings.supabase.enabled:
        from healthnote.integrations import SupabaseBackend, SupabaseSession, make_client

        client = make_client(settings.supabase, session_store=backend)
        remote_backend = SupabaseBackend(client)
        session = SupabaseSession(client)

    breaker = CircuitBreaker(
        CircuitBreakerConfig(
            failure_threshold=settings.sync.failure_threshold,
            open_duration=settings.sync.open_duration,
        )
    )
    remote = RemoteSync(remote_backend, session, timeout=settings.sync.timeout, breaker=breaker)
    pipeline = JournalPipeline(store, remote, IdentityResolver(store, session))
    return AppContext(settings=settings, store=store, pipeline=pipeline, session=session)


def get_context(ctx: click.Context) -> AppContext:
    obj = ctx.ensure_object(dict)
    if "app" not in obj:
        try:
            settings = load_settings(obj.get("config_file"))
        except ConfigurationError as e:
            raise click.ClickException(str(e)) from e
        obj["app"] = build_context(settings)
    return obj["app"]
