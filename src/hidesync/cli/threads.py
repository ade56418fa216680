"""
hide-sync CLI - commands that read and change hidden threads.
"""

from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from hidesync.cli.errors import ExitCode, print_error
from hidesync.cli.runner import run_command
from hidesync.core.document import UNKNOWN_BOARD

console = Console()


def _entry(thread_id: str, board: str) -> dict[str, str]:
    return {"thread_id": thread_id, "board_id": board}


def _print_site(domain: str, response: dict[str, Any]) -> None:
    if error := response.get("error"):
        print_error(error)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    threads = response.get("site", {}).get("threads", [])
    if not threads:
        console.print(f"[dim]No hidden threads on {domain}[/dim]")
        return

    table = Table(title=f"Hidden threads on {domain}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Board", style="cyan")
    table.add_column("Thread")
    for index, thread in enumerate(threads, start=1):
        table.add_row(str(index), thread["board_id"], thread["thread_id"])
    console.print(table)


def show(
    domain: str = typer.Argument(..., help="Site domain, e.g. 2ch.su"),
) -> None:
    """
    List hidden threads for a site, oldest first.

    Examples:
        hide-sync show 2ch.su
    """
    _print_site(domain, run_command({"type": "GET_STATE", "domain": domain}))


def hide(
    domain: str = typer.Argument(..., help="Site domain"),
    thread_id: str = typer.Argument(..., help="Thread id"),
    board: str = typer.Option(UNKNOWN_BOARD, "--board", "-b", help="Board the thread is on"),
) -> None:
    """
    Hide a thread.

    Examples:
        hide-sync hide 2ch.su 123456 --board b
    """
    response = run_command(
        {"type": "HIDE_THREAD", "domain": domain, "entry": _entry(thread_id, board)}
    )
    _print_site(domain, response)


def unhide(
    domain: str = typer.Argument(..., help="Site domain"),
    thread_id: str = typer.Argument(..., help="Thread id"),
    board: str = typer.Option(UNKNOWN_BOARD, "--board", "-b", help="Board the thread is on"),
) -> None:
    """
    Unhide a thread. Unhiding a thread that isn't hidden is a no-op.

    Examples:
        hide-sync unhide 2ch.su 123456 --board b
    """
    response = run_command(
        {"type": "UNHIDE_THREAD", "domain": domain, "entry": _entry(thread_id, board)}
    )
    _print_site(domain, response)
