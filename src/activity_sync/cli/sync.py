"""Sync commands for activity-sync."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated

import typer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from activity_sync.cli.common import (
    MaxDaysOption,
    RepoArgument,
    console,
    install_cancel_signal,
    run_async_command,
    validate_repo,
)
from activity_sync.config import Settings, get_settings
from activity_sync.db import create_tables, dispose_engine, get_session_factory
from activity_sync.fetching import HttpxTransport
from activity_sync.github import GitHubRestSpec, GitHubSyncClient
from activity_sync.jira import JiraSyncClient
from activity_sync.logging import get_logger
from activity_sync.sync import (
    AggregateSyncError,
    AggregateSyncResult,
    full_github_sync,
    full_jira_sync,
)

logger = get_logger(__name__)

app = typer.Typer(help="Sync upstream activity into the database")

JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Print the per-resource outcome as JSON after the report",
    ),
]


@dataclass
class SyncEnvironment:
    """What every sync of one CLI invocation shares."""

    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]
    transport: HttpxTransport
    signal: asyncio.Event
    write_lock: asyncio.Lock


@asynccontextmanager
async def _sync_environment() -> AsyncIterator[SyncEnvironment]:
    settings = get_settings()
    await create_tables()
    stop = asyncio.Event()
    install_cancel_signal(stop)
    try:
        async with HttpxTransport(timeout=settings.fetch.request_timeout_seconds) as transport:
            yield SyncEnvironment(
                settings=settings,
                session_factory=get_session_factory(),
                transport=transport,
                signal=stop,
                write_lock=asyncio.Lock(),
            )
    finally:
        await dispose_engine()


def _github_client(env: SyncEnvironment, owner: str, name: str) -> GitHubSyncClient:
    return GitHubSyncClient(
        env.session_factory,
        owner,
        name,
        token=env.settings.github_token or None,
        transport=env.transport,
        fetch_config=env.settings.fetch,
        spec=GitHubRestSpec(env.settings.github_api_url),
        write_lock=env.write_lock,
    )


def _jira_client(env: SyncEnvironment, projects: list[str]) -> JiraSyncClient:
    settings = env.settings
    return JiraSyncClient(
        env.session_factory,
        projects,
        host=settings.jira_host,
        user=settings.jira_user,
        token=settings.jira_token,
        transport=env.transport,
        fetch_config=settings.fetch,
        write_lock=env.write_lock,
    )


def _require_jira(settings: Settings) -> None:
    if not settings.jira_configured:
        console.print("[red]Error:[/red] JIRA_HOST, JIRA_USER and JIRA_TOKEN must be set")
        raise typer.Exit(1)


def _finish(results: list[AggregateSyncResult], failed: bool, as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps([r.to_dict() for r in results]))
    if any(r.cancelled for r in results):
        console.print("[yellow]Sync cancelled[/yellow]")
    if failed:
        raise typer.Exit(1)


@app.command("github")
def sync_github(
    repo: RepoArgument,
    max_days: MaxDaysOption = None,
    as_json: JsonOption = False,
) -> None:
    """Sync pulls, commits, CI runs, releases and statistics of a repository.

    Examples:
        actsync sync github octocat/hello-world
        actsync sync github octocat/hello-world --max-days 30
    """
    owner, name = validate_repo(repo)

    async def _sync() -> tuple[list[AggregateSyncResult], bool]:
        async with _sync_environment() as env:
            days = max_days or env.settings.sync.max_days
            try:
                result = await full_github_sync(
                    _github_client(env, owner, name), max_days=days, signal=env.signal
                )
            except AggregateSyncError as e:
                return [e.result], True
            return [result], False

    results, failed = run_async_command(_sync(), error_prefix="Sync failed")
    _finish(results, failed, as_json)


@app.command("jira")
def sync_jira(
    projects: Annotated[list[str], typer.Argument(help="Jira project keys, e.g. PROJ OPS")],
    max_days: MaxDaysOption = None,
    as_json: JsonOption = False,
) -> None:
    """Sync issues of one or more Jira projects.

    Examples:
        actsync sync jira PROJ
        actsync sync jira PROJ OPS --max-days 14
    """
    _require_jira(get_settings())

    async def _sync() -> tuple[list[AggregateSyncResult], bool]:
        async with _sync_environment() as env:
            days = max_days or env.settings.sync.max_days
            try:
                result = await full_jira_sync(
                    _jira_client(env, projects), max_days=days, signal=env.signal
                )
            except AggregateSyncError as e:
                return [e.result], True
            return [result], False

    results, failed = run_async_command(_sync(), error_prefix="Sync failed")
    _finish(results, failed, as_json)


@app.command("all")
def sync_all(
    max_days: MaxDaysOption = None,
    as_json: JsonOption = False,
) -> None:
    """Sync every tracked repository, then the tracked Jira projects.

    Scopes run one after the other; a failing scope does not stop the
    next one, but the command exits non-zero at the end.

    Examples:
        SYNC__TRACKED_REPOS='["octocat/hello-world"]' actsync sync all
    """
    settings = get_settings()
    repos = [validate_repo(repo) for repo in settings.sync.tracked_repos]
    jira_projects = settings.sync.jira_projects
    if jira_projects:
        _require_jira(settings)
    if not repos and not jira_projects:
        console.print(
            "[yellow]Nothing to sync:[/yellow] set SYNC__TRACKED_REPOS and/or SYNC__JIRA_PROJECTS"
        )
        raise typer.Exit(0)

    async def _sync() -> tuple[list[AggregateSyncResult], bool]:
        results: list[AggregateSyncResult] = []
        failed = False
        async with _sync_environment() as env:
            days = max_days or env.settings.sync.max_days
            for owner, name in repos:
                if env.signal.is_set():
                    break
                console.print(f"\n[bold]{owner}/{name}[/bold]")
                try:
                    results.append(
                        await full_github_sync(
                            _github_client(env, owner, name), max_days=days, signal=env.signal
                        )
                    )
                except AggregateSyncError as e:
                    logger.error("Sync of {}/{} failed", owner, name)
                    results.append(e.result)
                    failed = True
            if jira_projects and not env.signal.is_set():
                console.print(f"\n[bold]Jira: {', '.join(jira_projects)}[/bold]")
                try:
                    results.append(
                        await full_jira_sync(
                            _jira_client(env, jira_projects), max_days=days, signal=env.signal
                        )
                    )
                except AggregateSyncError as e:
                    logger.error("Sync of Jira projects failed")
                    results.append(e.result)
                    failed = True
        return results, failed

    results, failed = run_async_command(_sync(), error_prefix="Sync failed")
    _finish(results, failed, as_json)
