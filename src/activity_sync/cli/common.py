"""Common CLI helpers.

This module provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `install_cancel_signal`: Ctrl-C sets the shared sync cancellation signal
- Repository and max-days argument type aliases
"""

from __future__ import annotations

import asyncio
import signal
from collections.abc import Coroutine
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from activity_sync.logging import get_logger

logger = get_logger(__name__)

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def install_cancel_signal(stop: asyncio.Event) -> None:
    """Set ``stop`` on SIGINT for the running loop.

    Every sync observes the event, emits ``aborted`` and unwinds; the
    report then covers whatever settled before the interrupt.
    """
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, stop.set)
    except (NotImplementedError, RuntimeError) as e:
        # Windows loops and non-main threads: Ctrl-C raises KeyboardInterrupt instead
        logger.debug("Cannot install SIGINT handler: {}", e)


# -----------------------------------------------------------------------------
# Argument/Option Factories
# -----------------------------------------------------------------------------

RepoArgument = Annotated[
    str,
    typer.Argument(
        help="Repository in owner/name format (e.g., octocat/hello-world)",
    ),
]
"""Required positional repository argument."""

MaxDaysOption = Annotated[
    int | None,
    typer.Option(
        "--max-days",
        "-d",
        min=1,
        help="Never sync further back than this many days "
        "(defaults to SYNC__MAX_DAYS from settings)",
    ),
]
"""Sync window option type for CLI commands.

Usage:
    def command(max_days: MaxDaysOption = None):
"""


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split ``owner/name``.

    Raises:
        ValueError: If the string is not exactly two non-empty parts
    """
    parts = repo.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid repository: {repo!r}")
    return parts[0], parts[1]


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Raises:
        typer.Exit(1): If format is invalid
    """
    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print(f"[red]Error:[/red] Repository '{repo}' must be in owner/name format")
        raise typer.Exit(1) from None
