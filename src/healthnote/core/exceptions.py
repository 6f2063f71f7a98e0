"""
HealthNote exception hierarchy.

All healthnote exceptions inherit from HealthNoteError, making it easy for
consumers to catch library-level errors while still distinguishing specific
failure modes.  Storage errors live in ``healthnote.core.storage`` and also
derive from HealthNoteError.
"""


class HealthNoteError(Exception):
    """Base exception class for all healthnote errors."""


class ConfigurationError(HealthNoteError):
    """Raised for configuration errors (missing keys, invalid values)."""


class ValidationError(HealthNoteError, ValueError):
    """Raised when a profile, log, or bundle does not have the expected shape."""


class RemoteError(HealthNoteError):
    """Raised by remote backends. Never escapes the sync adapter."""


class RemoteUnreachableError(RemoteError):
    """The backend could not be reached (network, DNS, timeout)."""


class RemoteRejectedError(RemoteError):
    """The backend answered but refused the request (auth, constraint, schema)."""
