"""
Glue between synchronous typer commands and the async engine.

Each CLI invocation builds a fresh engine over the configured state file,
runs one command through the dispatcher, and closes the engine with a
flush so no debounced push is lost when the process exits.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import typer

from hidesync.cli.errors import ExitCode, print_error
from hidesync.core.commands import CommandDispatcher
from hidesync.core.config import HideSyncConfig, load_config
from hidesync.core.exceptions import HideSyncError
from hidesync.core.storage import JsonFileStore
from hidesync.core.sync import SyncEngine

MessageBuilder = Callable[[SyncEngine], dict[str, Any]]


def build_engine(config: HideSyncConfig) -> SyncEngine:
    """Create an engine persisting to the configured state file."""
    return SyncEngine(JsonFileStore(config.state_path), config=config)


async def _execute(config: HideSyncConfig, build: MessageBuilder) -> dict[str, Any]:
    engine = build_engine(config)
    dispatcher = CommandDispatcher(engine)
    try:
        await engine.ensure_ready()
        return await dispatcher.dispatch(build(engine))
    finally:
        await engine.close(flush=True)


def run_command(
    message: dict[str, Any] | MessageBuilder,
    config: HideSyncConfig | None = None,
) -> dict[str, Any]:
    """
    Dispatch one command and return the raw response.

    Args:
        message: The message, or a function building it from the ready engine
        config: Configuration (loaded from the usual layers if omitted)

    Returns:
        The dispatcher's response dict

    Raises:
        typer.Exit: If local state can't be loaded or saved
    """
    if config is None:
        config = load_config()
    build: MessageBuilder = message if callable(message) else (lambda _engine: message)
    try:
        return asyncio.run(_execute(config, build))
    except HideSyncError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
