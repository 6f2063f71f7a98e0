"""Local-first health journal.

Data model, identity resolution, the on-device store, the remote mirror,
the optimistic write pipeline, export/import and derived metrics.
"""

from .identity import IdentityResolver, SessionProvider
from .models import Category, DailyLog, ExportBundle, GrowthReferencePoint, ThemeOption, UserProfile
from .pipeline import AppState, JournalPipeline
from .remote import FetchResult, RemoteBackend, RemoteSync, SyncResult
from .store import JournalStore
from .transfer import export_bundle, import_bundle

__all__ = [
    "AppState",
    "Category",
    "DailyLog",
    "ExportBundle",
    "FetchResult",
    "GrowthReferencePoint",
    "IdentityResolver",
    "JournalPipeline",
    "JournalStore",
    "RemoteBackend",
    "RemoteSync",
    "SessionProvider",
    "SyncResult",
    "ThemeOption",
    "UserProfile",
    "export_bundle",
    "import_bundle",
]
