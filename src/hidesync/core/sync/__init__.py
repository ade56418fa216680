"""
Gist-backed synchronization of the hidden-thread document.

Example:
    >>> from hidesync.core.sync import SyncEngine
    >>> engine = SyncEngine(MemoryStore())
    >>> await engine.ensure_ready()
    >>> await engine.sync_now()
"""

from hidesync.core.sync.debounce import Debouncer
from hidesync.core.sync.engine import SyncEngine
from hidesync.core.sync.models import Credentials, SyncStatus, ValidationResult

__all__ = [
    "SyncEngine",
    "Debouncer",
    "Credentials",
    "SyncStatus",
    "ValidationResult",
]
