"""
Export and import of the full local state.

The file format is one JSON object::

    {"user": {...} | null, "logs": [...], "exportDate": "2025-01-31T09:00:00+09:00"}

Import keeps the historical acceptance policy: the profile is required and
always replaces the stored one, while logs replace the stored collection only
when ``logs`` is a list of valid entries.  A bundle with a missing or broken
``logs`` field therefore updates the profile and leaves existing logs alone.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

from loguru import logger

from healthnote.core.exceptions import ValidationError

from .models import DailyLog, ExportBundle, UserProfile
from .store import JournalStore


def build_bundle(store: JournalStore, now: datetime | None = None) -> ExportBundle:
    return ExportBundle(
        user=store.read_profile(),
        logs=store.read_logs(),
        export_date=now or datetime.now().astimezone(),
    )


def export_bundle(store: JournalStore, now: datetime | None = None) -> str:
    """Serialize the current local state. All three fields are always present."""
    return json.dumps(build_bundle(store, now).to_dict(), indent=2, ensure_ascii=False, allow_nan=False)


def _reject_constant(token: str):
    raise ValueError(f"non-standard JSON token {token}")


def _parse_logs(raw) -> list[DailyLog] | None:
    if not isinstance(raw, list):
        return None
    try:
        logs = [DailyLog.from_dict(item) for item in raw]
    except ValidationError as e:
        logger.warning(f"Ignoring malformed logs in import: {e}")
        return None
    ids = [log.id for log in logs if log.id]
    if len(ids) != len(set(ids)):
        logger.warning("Ignoring logs in import: duplicate ids")
        return None
    return logs


def import_bundle(store: JournalStore, payload: str | bytes) -> bool:
    """Restore from an exported bundle. Returns False without touching the store on failure."""
    try:
        data = json.loads(payload, parse_constant=_reject_constant)
    except (ValueError, TypeError) as e:
        logger.warning(f"Import failed: not valid JSON ({e})")
        return False

    if not isinstance(data, dict) or not data.get("user"):
        logger.warning("Import failed: bundle has no 'user'")
        return False

    try:
        profile = UserProfile.from_dict(data["user"])
    except (ValidationError, ValueError) as e:
        logger.warning(f"Import failed: invalid user ({e})")
        return False

    logs = _parse_logs(data.get("logs"))

    store.write_profile(profile)
    if logs is None:
        logger.info("Imported profile; existing logs kept")
    else:
        store.write_logs(logs)
        logger.info(f"Imported profile and {len(logs)} logs")
    return True


# ── Backup files ─────────────────────────────────────────────────────


def backup_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"healthnote_backup_{today.isoformat()}.json"


def write_backup(store: JournalStore, directory: str | Path, now: datetime | None = None) -> Path:
    """Write an export bundle into *directory* and return its path."""
    now = now or datetime.now().astimezone()
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / backup_filename(now.date())
    path.write_text(export_bundle(store, now), encoding="utf-8")
    return path


def read_backup(store: JournalStore, path: str | Path) -> bool:
    return import_bundle(store, Path(path).expanduser().read_text(encoding="utf-8"))
