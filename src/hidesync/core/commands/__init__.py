"""
Caller-facing command surface.

Example:
    >>> from hidesync.core.commands import CommandDispatcher
    >>> dispatcher = CommandDispatcher(engine)
    >>> await dispatcher.dispatch({"type": "GET_STATE", "domain": "example.test"})
"""

from hidesync.core.commands.dispatcher import CommandDispatcher
from hidesync.core.commands.models import (
    COMMAND_TYPES,
    UNKNOWN_ACTION,
    Command,
    CommandResponse,
    ForceSyncCommand,
    GetStateCommand,
    GetStatusCommand,
    HideThreadCommand,
    SetTokenCommand,
    UnhideThreadCommand,
    ValidateConnectionCommand,
    parse_command,
)

__all__ = [
    "CommandDispatcher",
    "Command",
    "CommandResponse",
    "GetStateCommand",
    "HideThreadCommand",
    "UnhideThreadCommand",
    "SetTokenCommand",
    "ValidateConnectionCommand",
    "ForceSyncCommand",
    "GetStatusCommand",
    "COMMAND_TYPES",
    "UNKNOWN_ACTION",
    "parse_command",
]
