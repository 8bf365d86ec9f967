"""GitHub API verification commands."""

from datetime import UTC, datetime

import typer
from rich.table import Table

from activity_sync.cli.common import console, run_async_command
from activity_sync.config import get_settings
from activity_sync.github import (
    GitHubAuthenticationError,
    GitHubClient,
    GitHubRateLimitError,
)

app = typer.Typer(help="GitHub API commands")


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


def _usage_style(used: int, limit: int) -> str:
    usage_pct = (used / limit * 100) if limit else 0.0
    if usage_pct < 50:
        return f"[green]{usage_pct:.1f}%[/green]"
    if usage_pct < 80:
        return f"[yellow]{usage_pct:.1f}%[/yellow]"
    return f"[red]{usage_pct:.1f}%[/red]"


@app.command("rate-limit")
def show_rate_limit() -> None:
    """Show the remaining core GitHub API quota.

    A full sync of a busy repository can take hundreds of requests;
    check the quota before starting one.

    Examples:
        actsync github rate-limit
    """

    async def _check() -> None:
        settings = get_settings()

        if not settings.github_token:
            console.print("[red]Error:[/red] GITHUB_TOKEN not set in environment")
            raise typer.Exit(1)

        try:
            async with GitHubClient(settings.github_token) as client:
                rate = await client.get_rate_limit()
        except GitHubAuthenticationError:
            console.print("[red]Error:[/red] Invalid GitHub token")
            raise typer.Exit(1) from None
        except GitHubRateLimitError as e:
            console.print("[red]Error:[/red] Rate limit exceeded")
            if e.reset_at:
                console.print(f"  Resets at: {e.reset_at.strftime('%H:%M:%S UTC')}")
            raise typer.Exit(1) from None

        reset_at = rate["reset"]
        seconds_left = 0
        if isinstance(reset_at, datetime):
            seconds_left = int((reset_at - datetime.now(UTC)).total_seconds())

        table = Table(title="GitHub API Rate Limit")
        table.add_column("Pool", style="bold")
        table.add_column("Remaining", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Used %", justify="right")
        table.add_column("Resets In", justify="right")
        table.add_row(
            "core",
            str(rate["remaining"]),
            str(rate["limit"]),
            _usage_style(int(rate["used"]), int(rate["limit"])),
            _format_time_remaining(seconds_left),
        )
        console.print()
        console.print(table)

        if rate["remaining"] == 0:
            console.print(
                f"\n[red]Rate limit exhausted![/red] "
                f"Wait {_format_time_remaining(seconds_left)} before syncing."
            )

    run_async_command(_check(), error_prefix="Rate limit check failed")
