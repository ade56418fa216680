"""
hide-sync CLI - token management, connection validation, and syncing.
"""

import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from hidesync.cli.errors import ExitCode, print_error, print_no_token_error
from hidesync.cli.runner import run_command

console = Console()


def _render_status(status: dict[str, Any]) -> None:
    table = Table(title="Sync Status", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    enabled = status.get("syncEnabled")
    table.add_row("Sync", "[green]enabled[/green]" if enabled else "[yellow]disabled[/yellow]")
    table.add_row("Last sync", status.get("lastSync") or "[dim]never[/dim]")
    table.add_row("Gist", status.get("remoteContainerId") or "[dim]none[/dim]")
    last_error = status.get("lastError")
    table.add_row("Last error", f"[red]{last_error}[/red]" if last_error else "[dim]none[/dim]")
    console.print(table)


def _fail_on_error(response: dict[str, Any]) -> None:
    if error := response.get("error"):
        print_error(error)
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def status(
    as_json: bool = typer.Option(False, "--json", help="Print the raw status as JSON"),
) -> None:
    """
    Show whether sync is enabled, when it last ran, and the last error.

    Examples:
        hide-sync status
        hide-sync status --json
    """
    response = run_command({"type": "GET_STATUS"})
    _fail_on_error(response)
    if as_json:
        console.print_json(json.dumps(response["status"]))
        return
    _render_status(response["status"])


def token(
    value: str | None = typer.Argument(None, help="GitHub token with the gist scope"),
    clear: bool = typer.Option(False, "--clear", help="Remove the stored token"),
) -> None:
    """
    Store or clear the GitHub token.

    Storing a token doesn't contact GitHub; run `hide-sync validate` next.

    Examples:
        hide-sync token ghp_xxx
        hide-sync token --clear
    """
    if value is None and not clear:
        print_error("Pass a token or --clear", solution="hide-sync token <TOKEN>")
        raise typer.Exit(ExitCode.USER_ERROR)

    response = run_command({"type": "SET_TOKEN", "token": None if clear else value})
    _fail_on_error(response)
    if clear or not (value or "").strip():
        console.print("[yellow]Token removed. Sync disabled.[/yellow]")
    else:
        console.print("[green]✓[/green] Token saved. Run [bold]hide-sync validate[/bold] to connect.")


def validate(
    value: str | None = typer.Argument(None, help="Token to validate (defaults to the stored one)"),
) -> None:
    """
    Check the token with GitHub, create the gist if needed, and pull.

    Examples:
        hide-sync validate
        hide-sync validate ghp_xxx
    """
    missing_token = False

    def build(engine: Any) -> dict[str, Any]:
        nonlocal missing_token
        token_value = value if value is not None else engine.credentials.token
        missing_token = not token_value
        return {"type": "VALIDATE_CONNECTION", "token": token_value}

    response = run_command(build)
    if missing_token:
        print_no_token_error()
        raise typer.Exit(ExitCode.USER_ERROR)
    _fail_on_error(response)

    gist_id = response.get("result", {}).get("remoteContainerId")
    console.print(f"[green]✓[/green] Connected. Gist: [bold]{gist_id}[/bold]")
    _render_status(response["status"])


def sync() -> None:
    """
    Push the local state to the gist now.

    Examples:
        hide-sync sync
    """
    response = run_command({"type": "FORCE_SYNC"})
    _fail_on_error(response)
    status_record = response["status"]
    if status_record.get("lastError"):
        print_error(status_record["lastError"])
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    if not status_record.get("syncEnabled"):
        print_no_token_error()
        raise typer.Exit(ExitCode.USER_ERROR)
    console.print("[green]✓[/green] Pushed to gist")
    _render_status(status_record)
