"""
Hidden-thread document models and the in-memory document store.

Example:
    >>> from hidesync.core.document import DocumentStore, ThreadRef
    >>> store = DocumentStore(board_limit=150)
    >>> store.hide("example.test", ThreadRef(thread_id="1", board_id="b"))
"""

from hidesync.core.document.models import (
    DEFAULT_PROFILE,
    DOCUMENT_VERSION,
    UNKNOWN_BOARD,
    Document,
    Profile,
    SiteState,
    ThreadRef,
    utc_now,
)
from hidesync.core.document.store import (
    DEFAULT_BOARD_LIMIT,
    DocumentStore,
    enforce_board_limit,
)

__all__ = [
    # Models
    "Document",
    "Profile",
    "SiteState",
    "ThreadRef",
    "DEFAULT_PROFILE",
    "DOCUMENT_VERSION",
    "UNKNOWN_BOARD",
    "utc_now",
    # Store
    "DocumentStore",
    "DEFAULT_BOARD_LIMIT",
    "enforce_board_limit",
]
