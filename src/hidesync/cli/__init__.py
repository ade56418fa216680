"""
hide-sync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from hidesync import __version__
from hidesync.cli import sync, threads
from hidesync.core.config import load_layered_env

PANEL_THREADS = "Hidden Threads"
PANEL_SYNC = "Gist Sync"

app = typer.Typer(
    name="hide-sync",
    help="Keep hidden imageboard threads in sync through a private GitHub gist",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for CLI commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"hide-sync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    hide-sync - hidden-thread state, mirrored to a private gist.

    Quick Start:
        1. hide-sync token <TOKEN>      # Store a token with the gist scope
        2. hide-sync validate           # Check it and create the gist
        3. hide-sync hide 2ch.su 123 -b b
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()
    setup_logging(debug)
    ctx.obj = {"debug": debug}


app.command(name="show", rich_help_panel=PANEL_THREADS)(threads.show)
app.command(name="hide", rich_help_panel=PANEL_THREADS)(threads.hide)
app.command(name="unhide", rich_help_panel=PANEL_THREADS)(threads.unhide)

app.command(name="status", rich_help_panel=PANEL_SYNC)(sync.status)
app.command(name="token", rich_help_panel=PANEL_SYNC)(sync.token)
app.command(name="validate", rich_help_panel=PANEL_SYNC)(sync.validate)
app.command(name="sync", rich_help_panel=PANEL_SYNC)(sync.sync)


__all__ = ["app"]
