"""Remote backend integrations.

Each backend satisfies ``healthnote.journal.remote.RemoteBackend``.
"""

from .supabase_backend import SupabaseBackend, SupabaseSession, make_client

__all__ = [
    "SupabaseBackend",
    "SupabaseSession",
    "make_client",
]
