"""
hide-sync - Hidden-thread state mirrored to a private GitHub gist

Keeps a local-first record of hidden imageboard threads per site and
synchronizes it across installations through a single gist file.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from hidesync.core.config.models import HideSyncConfig
from hidesync.core.document.models import Document, SiteState, ThreadRef
from hidesync.core.sync.engine import SyncEngine

__all__ = ["HideSyncConfig", "Document", "SiteState", "ThreadRef", "SyncEngine", "__version__"]
