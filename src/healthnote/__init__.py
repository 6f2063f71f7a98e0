"""HealthNote: local-first personal health journal core."""

__version__ = "0.1.0"
