"""
Command dispatch: the single entry point UI collaborators talk to.

Each command waits for the engine's current initialization, runs against
the engine, and mutating commands fan the affected site's state out to
observers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

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
from hidesync.core.exceptions import HideSyncError
from hidesync.core.notify import StateBroadcaster
from hidesync.core.sync.engine import SyncEngine

logger = logging.getLogger(__name__)


def _describe_validation_error(kind: str, error: ValidationError) -> str:
    first = error.errors()[0]
    loc = list(first.get("loc", ()))
    # Tagged-union errors are prefixed with the tag itself
    if loc and loc[0] == kind:
        loc = loc[1:]
    location = ".".join(str(part) for part in loc)
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


class CommandDispatcher:
    """
    Routes commands to a SyncEngine.

    Example:
        >>> dispatcher = CommandDispatcher(engine, broadcaster)
        >>> await dispatcher.dispatch({"type": "GET_STATUS"})
        {'status': {'syncEnabled': False, ...}}
    """

    def __init__(
        self,
        engine: SyncEngine,
        broadcaster: StateBroadcaster | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            engine: Engine all commands run against
            broadcaster: Observer registry for state updates
        """
        self.engine = engine
        self.broadcaster = broadcaster or StateBroadcaster()

    async def dispatch(self, message: Mapping[str, Any]) -> dict[str, Any]:
        """
        Handle a raw message and return a raw response.

        Never raises: unknown types, invalid fields, and engine errors all
        come back as ``{"error": ...}``.
        """
        kind = message.get("type")
        if not isinstance(kind, str) or kind not in COMMAND_TYPES:
            logger.debug("Unknown command type: %r", kind)
            return CommandResponse(error=UNKNOWN_ACTION).to_message()

        try:
            command = parse_command(message)
        except ValidationError as e:
            return CommandResponse(
                error=f"Invalid {kind} message: {_describe_validation_error(kind, e)}"
            ).to_message()

        try:
            response = await self.handle(command)
        except HideSyncError as e:
            logger.debug("%s rejected: %s", kind, e)
            return CommandResponse(error=str(e)).to_message()
        except Exception as e:
            logger.exception("Unexpected error handling %s", kind)
            return CommandResponse(error=f"Unexpected error: {e}").to_message()

        return response.to_message()

    async def handle(self, command: Command) -> CommandResponse:
        """
        Execute a parsed command.

        Raises:
            HideSyncError: If the engine rejects the command
        """
        engine = self.engine
        await engine.ensure_ready()

        match command:
            case GetStateCommand(domain=domain):
                site = await engine.get_site_state(domain)
                return CommandResponse(site=site, status=engine.get_status())
            case HideThreadCommand(domain=domain, entry=entry):
                site = await engine.hide_thread(domain, entry)
                await self.broadcast(domain)
                return CommandResponse(site=site)
            case UnhideThreadCommand(domain=domain, entry=entry):
                site = await engine.unhide_thread(domain, entry)
                await self.broadcast(domain)
                return CommandResponse(site=site)
            case SetTokenCommand(token=token):
                return CommandResponse(status=await engine.set_token(token))
            case ValidateConnectionCommand(token=token):
                result = await engine.validate_connection(token)
                await self.broadcast(engine.config.sentinel_domain)
                return CommandResponse(result=result, status=engine.get_status())
            case ForceSyncCommand():
                return CommandResponse(status=await engine.sync_now())
            case GetStatusCommand():
                return CommandResponse(status=engine.get_status())
            case _:
                return CommandResponse(error=UNKNOWN_ACTION)

    async def broadcast(self, domain: str) -> int:
        """Send a domain's current state to matching observers."""
        site = await self.engine.get_site_state(domain)
        return await self.broadcaster.broadcast(domain, site)
