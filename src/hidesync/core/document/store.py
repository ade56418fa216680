"""
In-memory authoritative copy of the hidden-thread document.

DocumentStore is pure data manipulation: it never touches disk or network.
The sync engine wraps each mutation with persistence and push scheduling.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from hidesync.core.document.models import (
    DEFAULT_PROFILE,
    Document,
    Profile,
    SiteState,
    ThreadRef,
    utc_now,
)

DEFAULT_BOARD_LIMIT = 150


def enforce_board_limit(site: SiteState, board_id: str, limit: int) -> list[ThreadRef]:
    """
    Trim a board's entries down to the retention limit.

    Evicts the oldest entries of ``board_id`` only; other boards keep
    their entries and their positions.

    Args:
        site: Site whose thread list is trimmed in place
        board_id: Board to enforce the limit on
        limit: Maximum number of entries allowed for the board

    Returns:
        The evicted entries, oldest first
    """
    overflow = site.count_for_board(board_id) - limit
    if overflow <= 0:
        return []

    evicted: list[ThreadRef] = []
    kept: list[ThreadRef] = []
    for entry in site.threads:
        if entry.board_id == board_id and len(evicted) < overflow:
            evicted.append(entry)
        else:
            kept.append(entry)
    site.threads = kept
    return evicted


class DocumentStore:
    """
    Holds the current Document and applies hide/unhide mutations.

    Example:
        >>> store = DocumentStore()
        >>> site = store.hide("example.test", ThreadRef(thread_id="123", board_id="b"))
        >>> [t.thread_id for t in site.threads]
        ['123']
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        board_limit: int = DEFAULT_BOARD_LIMIT,
        profile_name: str = DEFAULT_PROFILE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the store.

        Args:
            document: Starting document (an empty one is created if omitted)
            board_limit: Maximum entries kept per board
            profile_name: Profile all operations apply to
            clock: Source of timestamps for last_updated
        """
        if board_limit < 1:
            raise ValueError(f"board_limit must be >= 1, got {board_limit}")
        self.board_limit = board_limit
        self.profile_name = profile_name
        self._clock = clock
        self._document = document or Document.empty(profile_name)

    @property
    def document(self) -> Document:
        """The current document."""
        return self._document

    def replace(self, document: Document) -> None:
        """Swap in a new document wholesale (used when pulling from remote)."""
        self._document = document

    def profile(self) -> Profile:
        """Get the active profile, creating it if the document lacks one."""
        profile = self._document.profiles.get(self.profile_name)
        if profile is None:
            profile = Profile(last_updated=self._clock())
            self._document.profiles[self.profile_name] = profile
        return profile

    def has_site(self, domain: str) -> bool:
        """Check whether the active profile already has state for a domain."""
        profile = self._document.profiles.get(self.profile_name)
        return profile is not None and domain in profile.sites

    def site_state(self, domain: str) -> SiteState:
        """Get a site's state, creating an empty one if absent."""
        profile = self.profile()
        site = profile.sites.get(domain)
        if site is None:
            site = SiteState()
            profile.sites[domain] = site
        return site

    def hide(self, domain: str, ref: ThreadRef) -> SiteState:
        """
        Hide a thread on a site.

        Re-hiding an already hidden thread moves it to the most recent
        position. The board's retention limit is applied afterwards.
        """
        site = self.site_state(domain)
        site.threads = [item for item in site.threads if item.identity != ref.identity]
        site.threads.append(ref)
        enforce_board_limit(site, ref.board_id, self.board_limit)
        self.touch()
        return site

    def unhide(self, domain: str, ref: ThreadRef) -> SiteState:
        """Unhide a thread on a site. Missing threads are a no-op."""
        site = self.site_state(domain)
        site.threads = [item for item in site.threads if item.identity != ref.identity]
        self.touch()
        return site

    def touch(self) -> None:
        """Stamp the active profile's last_updated with the current time."""
        self.profile().last_updated = self._clock()
