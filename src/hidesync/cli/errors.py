"""
Standardized error handling and exit codes for the hide-sync CLI.
"""

from enum import IntEnum

from rich.console import Console

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for hide-sync CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Command was rejected or failed."""

    USER_ERROR = 2
    """User input or configuration error (actionable by user)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_no_token_error() -> None:
    """Print error when a command needs a token and none is stored."""
    print_error(
        "No GitHub token configured",
        reason="Syncing needs a personal access token with the gist scope",
        solution="hide-sync token <TOKEN>  # then: hide-sync validate",
    )
