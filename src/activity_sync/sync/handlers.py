"""Full syncs of one upstream scope with terminal progress and report.

A full sync fans out every resource of the scope through the
orchestrator, writes a progress character per synced element and ends
with a report line per failed resource (or a check mark).
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, TextIO

from activity_sync.logging import get_logger

from .exceptions import AggregateSyncError
from .orchestrator import SyncOperation, SyncOrchestrator
from .report import GITHUB_PROGRESS_DOTS, JIRA_PROGRESS_DOTS, DotRenderer, format_report
from .results import AggregateSyncResult

if TYPE_CHECKING:
    from activity_sync.github.sync_client import GitHubSyncClient
    from activity_sync.jira.sync_client import JiraSyncClient

logger = get_logger(__name__)

GITHUB_DEPENDENCIES: Mapping[str, str] = {"pull-commit": "pull"}


def cutoff_for(max_days: int | None, now: datetime | None = None) -> datetime | None:
    """Oldest timestamp to sync for a ``max_days`` window (None: unbounded)."""
    if max_days is None:
        return None
    return (now or datetime.now(UTC)) - timedelta(days=max_days)


def github_operations(
    client: GitHubSyncClient,
    *,
    newer_than: datetime | None = None,
    signal: asyncio.Event | None = None,
) -> dict[str, SyncOperation]:
    """Operation map of a full GitHub sync, in report order."""
    return {
        "action-run": lambda: client.sync_action_runs(newer_than=newer_than, signal=signal),
        "action-workflow": lambda: client.sync_action_workflows(signal=signal),
        "commit": lambda: client.sync_commits(newer_than=newer_than, signal=signal),
        "pull": lambda: client.sync_pulls(newer_than=newer_than, signal=signal),
        "pull-commit": lambda pulls: client.sync_pull_commits(pulls, signal=signal),
        "release": lambda: client.sync_releases(newer_than=newer_than, signal=signal),
        "stats-code-frequency": lambda: client.sync_stats_code_frequency(signal=signal),
        "stats-commit-activity": lambda: client.sync_stats_commit_activity(signal=signal),
        "stats-contributors": lambda: client.sync_stats_contributors(signal=signal),
        "stats-participation": lambda: client.sync_stats_participation(signal=signal),
        "stats-punch-card": lambda: client.sync_stats_punch_card(signal=signal),
    }


async def _run_with_report(
    renderer: DotRenderer,
    operations: Mapping[str, SyncOperation],
    dependencies: Mapping[str, str] | None,
    signal: asyncio.Event | None,
    out: TextIO,
) -> AggregateSyncResult:
    renderer.write_legend()
    result = await SyncOrchestrator(signal=signal).run(
        operations, dependencies, raise_on_failure=False
    )
    out.write("\n")
    report = format_report(result)
    if report:
        out.write(report + "\n")
    out.flush()

    if result.has_failures and not result.cancelled:
        raise AggregateSyncError(result)
    return result


async def full_github_sync(
    client: GitHubSyncClient,
    *,
    max_days: int | None = None,
    signal: asyncio.Event | None = None,
    out: TextIO | None = None,
    now: datetime | None = None,
) -> AggregateSyncResult:
    """Sync every GitHub resource of the client's repository.

    Args:
        client: Sync client of the repository
        max_days: Only sync elements from the last ``max_days`` days
        signal: Shared cancellation signal (e.g. set on Ctrl-C)
        out: Where progress and the report are written (stdout if omitted)
        now: Reference time for ``max_days``

    Returns:
        Every resource's outcome

    Raises:
        AggregateSyncError: If a resource failed and the run was not cancelled
    """
    out = out or sys.stdout
    newer_than = cutoff_for(max_days, now)
    logger.info("Full GitHub sync of {}", client.scope)

    renderer = DotRenderer(out, GITHUB_PROGRESS_DOTS, stats=True)
    renderer.attach(client.events)
    operations = github_operations(client, newer_than=newer_than, signal=signal)
    return await _run_with_report(renderer, operations, GITHUB_DEPENDENCIES, signal, out)


async def full_jira_sync(
    client: JiraSyncClient,
    *,
    max_days: int | None = None,
    signal: asyncio.Event | None = None,
    out: TextIO | None = None,
    now: datetime | None = None,
) -> AggregateSyncResult:
    """Sync the issues of the client's Jira projects.

    Same contract as full_github_sync.
    """
    out = out or sys.stdout
    newer_than = cutoff_for(max_days, now)
    logger.info("Full Jira sync of {}", client.scope)

    renderer = DotRenderer(out, JIRA_PROGRESS_DOTS)
    renderer.attach(client.events)
    operations: dict[str, SyncOperation] = {
        "search-issues": lambda: client.sync_search_issues(newer_than=newer_than, signal=signal),
    }
    return await _run_with_report(renderer, operations, None, signal, out)
