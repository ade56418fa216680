"""
Data models for the hidden-thread document.

The document is the payload mirrored to the remote gist. Its JSON shape
(snake_case keys, UTC ISO-8601 timestamps) is the wire format, so field
names here must stay stable.

Example:
    >>> doc = Document.empty()
    >>> doc.profiles["default"].sites
    {}
    >>> ref = ThreadRef(thread_id="123", board_id="b")
    >>> ref.identity
    ('123', 'b')
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hidesync.core.exceptions import DocumentParseError

DOCUMENT_VERSION = 1
DEFAULT_PROFILE = "default"
UNKNOWN_BOARD = "unknown"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ThreadRef(BaseModel):
    """
    Reference to a hidden thread.

    Identity is the (thread_id, board_id) pair; the same thread number on
    two boards is two different threads.
    """

    thread_id: str = Field(..., min_length=1, description="Thread identifier on its board")
    board_id: str = Field(default=UNKNOWN_BOARD, description="Board the thread belongs to")

    model_config = ConfigDict(frozen=True)

    @field_validator("thread_id", "board_id", mode="before")
    @classmethod
    def coerce_numbers(cls, v: object) -> object:
        """Accept numeric ids, which show up in hand-edited gists."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def identity(self) -> tuple[str, str]:
        """The (thread_id, board_id) pair identifying this thread."""
        return (self.thread_id, self.board_id)


class SiteState(BaseModel):
    """Hidden threads for one site, in insertion order (oldest first)."""

    threads: list[ThreadRef] = Field(default_factory=list)

    def contains(self, ref: ThreadRef) -> bool:
        """Check whether a thread with the same identity is hidden."""
        return any(item.identity == ref.identity for item in self.threads)

    def count_for_board(self, board_id: str) -> int:
        """Number of hidden threads on the given board."""
        return sum(1 for item in self.threads if item.board_id == board_id)


class Profile(BaseModel):
    """A named set of sites. Only the default profile is used."""

    last_updated: datetime = Field(default_factory=utc_now)
    sites: dict[str, SiteState] = Field(default_factory=dict)


class Document(BaseModel):
    """
    The full synchronized state: profiles -> sites -> hidden threads.

    Attributes:
        version: Schema tag, currently 1
        profiles: Mapping of profile name to Profile
    """

    version: int = Field(default=DOCUMENT_VERSION)
    profiles: dict[str, Profile] = Field(default_factory=dict)

    @classmethod
    def empty(cls, profile_name: str = DEFAULT_PROFILE) -> Document:
        """Create a document holding one empty profile."""
        return cls(profiles={profile_name: Profile()})

    def to_json(self) -> str:
        """Serialize to the text stored in the gist file."""
        return json.dumps(self.model_dump(mode="json"), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> Document:
        """
        Parse gist file content into a Document.

        Args:
            text: Serialized document

        Returns:
            Parsed Document

        Raises:
            DocumentParseError: If the text is not JSON or does not match the schema
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise DocumentParseError(
                "Invalid JSON in gist",
                errors=e.error_count(),
            ) from e
