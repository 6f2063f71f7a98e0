"""Core plumbing: configuration, exceptions, storage, logging, CLI."""

from .config import load_settings
from .config_schema import HealthNoteConfig
from .exceptions import (
    ConfigurationError,
    HealthNoteError,
    RemoteError,
    RemoteRejectedError,
    RemoteUnreachableError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "HealthNoteConfig",
    "HealthNoteError",
    "RemoteError",
    "RemoteRejectedError",
    "RemoteUnreachableError",
    "ValidationError",
    "load_settings",
]
