"""Pydantic models for HealthNote settings.

``load_settings`` validates the merged layers into ``HealthNoteConfig``; the
rest of the package reads settings only through these models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

MIN_ANON_KEY_LENGTH = 20


class PathsConfig(BaseModel):
    """File-system paths. ``store_dir`` and ``log_dir`` default to subdirectories of ``data_dir``."""

    data_dir: Path = Path("~/.healthnote-data").expanduser()
    store_dir: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "store_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @model_validator(mode="after")
    def _derive_subdirs(self) -> PathsConfig:
        if self.store_dir is None:
            self.store_dir = self.data_dir / "store"
        if self.log_dir is None:
            self.log_dir = self.data_dir / "logs"
        return self


class SupabaseConfig(BaseModel):
    """Remote backend credentials. Anything short of a real URL and key means local-only mode."""

    url: str = ""
    anon_key: str = ""

    @property
    def enabled(self) -> bool:
        # Placeholder or truncated credentials count as unset
        return self.url.startswith("http") and len(self.anon_key) > MIN_ANON_KEY_LENGTH


class SyncConfig(BaseModel):
    """Remote sync tuning."""

    timeout: float = 10.0
    failure_threshold: int = 3
    open_duration: float = 300.0

    @field_validator("timeout", "open_duration")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("failure_threshold")
    @classmethod
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


class LoggingConfig(BaseModel):
    level: str = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class HealthNoteConfig(BaseModel):
    """Root settings model.

    Uses ``extra="allow"`` so unknown sections in a config file are kept
    rather than rejected.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig()
    supabase: SupabaseConfig = SupabaseConfig()
    sync: SyncConfig = SyncConfig()
    logging: LoggingConfig = LoggingConfig()
