"""
Command and response models for the caller-facing message surface.

Callers send plain dicts such as ``{"type": "HIDE_THREAD", "domain": ...,
"entry": {...}}``. They are parsed into a closed, discriminated union of
command models; anything whose ``type`` is not listed in COMMAND_TYPES is
reported as an unknown action.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from hidesync.core.document.models import SiteState, ThreadRef
from hidesync.core.sync.models import SyncStatus, ValidationResult

UNKNOWN_ACTION = "unknown_action"


class _Command(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class GetStateCommand(_Command):
    """Read a site's hidden threads and the sync status."""

    type: Literal["GET_STATE"] = "GET_STATE"
    domain: str = Field(..., min_length=1)


class HideThreadCommand(_Command):
    """Hide a thread on a site."""

    type: Literal["HIDE_THREAD"] = "HIDE_THREAD"
    domain: str = Field(..., min_length=1)
    entry: ThreadRef


class UnhideThreadCommand(_Command):
    """Unhide a thread on a site."""

    type: Literal["UNHIDE_THREAD"] = "UNHIDE_THREAD"
    domain: str = Field(..., min_length=1)
    entry: ThreadRef


class SetTokenCommand(_Command):
    """Replace (or clear, with an empty/missing token) the stored token."""

    type: Literal["SET_TOKEN"] = "SET_TOKEN"
    token: str | None = None


class ValidateConnectionCommand(_Command):
    """Check a token against the API and bind the gist."""

    type: Literal["VALIDATE_CONNECTION"] = "VALIDATE_CONNECTION"
    token: str | None = None


class ForceSyncCommand(_Command):
    """Push the local document now."""

    type: Literal["FORCE_SYNC"] = "FORCE_SYNC"


class GetStatusCommand(_Command):
    """Read the sync status."""

    type: Literal["GET_STATUS"] = "GET_STATUS"


Command = Annotated[
    Union[
        GetStateCommand,
        HideThreadCommand,
        UnhideThreadCommand,
        SetTokenCommand,
        ValidateConnectionCommand,
        ForceSyncCommand,
        GetStatusCommand,
    ],
    Field(discriminator="type"),
]

COMMAND_TYPES = frozenset(
    {
        "GET_STATE",
        "HIDE_THREAD",
        "UNHIDE_THREAD",
        "SET_TOKEN",
        "VALIDATE_CONNECTION",
        "FORCE_SYNC",
        "GET_STATUS",
    }
)

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(message: Mapping[str, Any]) -> Command:
    """
    Parse a raw message into a command model.

    Args:
        message: Dict with a ``type`` key and the command's fields

    Returns:
        The matching command model

    Raises:
        pydantic.ValidationError: If the type is unknown or fields are invalid
    """
    return _command_adapter.validate_python(dict(message))


class CommandResponse(BaseModel):
    """
    Result of a command. Only the fields a command produces are set.

    Attributes:
        site: Site state (GET_STATE, HIDE_THREAD, UNHIDE_THREAD)
        status: Sync status (GET_STATE, SET_TOKEN, VALIDATE_CONNECTION, ...)
        result: Gist binding (VALIDATE_CONNECTION)
        error: Error message when the command was rejected
    """

    site: SiteState | None = None
    status: SyncStatus | None = None
    result: ValidationResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_message(self) -> dict[str, Any]:
        """
        Serialize for the message surface, omitting unset top-level fields.

        Nested None values (e.g. ``status.lastSync``) are kept.
        """
        message: dict[str, Any] = {}
        if self.site is not None:
            message["site"] = self.site.model_dump(mode="json")
        if self.status is not None:
            message["status"] = self.status.to_record()
        if self.result is not None:
            message["result"] = self.result.to_record()
        if self.error is not None:
            message["error"] = self.error
        return message
