"""Async generators yielding GitHub resources page by page.

List endpoints follow ``Link: rel="next"``. Time-ordered lists (pulls,
action runs, releases) stop at the first element older than the
incremental window. Statistics endpoints use the GitHub backoff so a
202 "still computing" answer is waited out.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

import httpx

from activity_sync.fetching.backoff import BackoffStrategy
from activity_sync.fetching.context import FetchContext
from activity_sync.fetching.executor import ensure_success
from activity_sync.logging import get_logger
from activity_sync.schemas.github import (
    GitHubActionRun,
    GitHubActionWorkflow,
    GitHubCommit,
    GitHubPull,
    GitHubRelease,
    GitHubStatsCodeFrequency,
    GitHubStatsCommitActivity,
    GitHubStatsContributor,
    GitHubStatsParticipation,
    GitHubStatsPunchCard,
)

from .rest_spec import (
    ACTION_RUNS_SCHEMA,
    ACTION_WORKFLOWS_SCHEMA,
    COMMITS_SCHEMA,
    PULL_COMMITS_SCHEMA,
    PULLS_SCHEMA,
    RELEASES_SCHEMA,
    STATS_CODE_FREQUENCY_SCHEMA,
    STATS_COMMIT_ACTIVITY_SCHEMA,
    STATS_CONTRIBUTORS_SCHEMA,
    STATS_PARTICIPATION_SCHEMA,
    STATS_PUNCH_CARD_SCHEMA,
    GitHubRestSpec,
    create_github_request,
)

logger = get_logger(__name__)

ACTION_RUNS_MAX_PAGES = 10_000
"""Busy repositories easily have tens of thousands of runs."""


async def _pages(
    request: httpx.Request,
    schema: Any,
    context: FetchContext,
    **kwargs: Any,
) -> AsyncIterator[Any]:
    async for result in context.fetch_exhaustively(request, schema, **kwargs):
        yield ensure_success(result).data


def _older(timestamp: datetime | None, newer_than: datetime | None) -> bool:
    return newer_than is not None and timestamp is not None and timestamp < newer_than


# ------------------------------------------------------------------------------
# Lists
# ------------------------------------------------------------------------------
async def fetch_pulls(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    newer_than: datetime | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubPull]:
    """Yield pulls, most recently updated first, down to ``newer_than``."""
    context = context or FetchContext()
    request = create_github_request((spec or GitHubRestSpec()).pulls(owner, repo), token=token)
    async for pulls in _pages(request, PULLS_SCHEMA, context):
        for pull in pulls:
            if _older(pull.updated_at, newer_than):
                logger.debug("Reached pull not updated since {}: #{}", newer_than, pull.number)
                return
            yield pull


async def fetch_pull_commits(
    pull: GitHubPull,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubCommit]:
    """Yield every commit of a pull."""
    context = context or FetchContext()
    request = create_github_request((spec or GitHubRestSpec()).pull_commits(pull), token=token)
    async for commits in _pages(request, PULL_COMMITS_SCHEMA, context):
        for commit in commits:
            yield commit


async def fetch_commits(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    newer_than: datetime | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubCommit]:
    """Yield commits of the default branch, filtered upstream by ``since``."""
    context = context or FetchContext()
    url = (spec or GitHubRestSpec()).commits(owner, repo, since=newer_than)
    request = create_github_request(url, token=token)
    async for commits in _pages(request, COMMITS_SCHEMA, context):
        for commit in commits:
            yield commit


async def fetch_action_runs(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    newer_than: datetime | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubActionRun]:
    """Yield workflow runs, newest first, down to ``newer_than``."""
    context = context or FetchContext()
    request = create_github_request((spec or GitHubRestSpec()).action_runs(owner, repo), token=token)
    max_pages = max(context.max_pages, ACTION_RUNS_MAX_PAGES)
    async for page in _pages(request, ACTION_RUNS_SCHEMA, context, max_pages=max_pages):
        for run in page.workflow_runs:
            if _older(run.updated_at, newer_than):
                logger.debug("Reached run not updated since {}: {}", newer_than, run.html_url)
                return
            yield run


async def fetch_action_workflows(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubActionWorkflow]:
    """Yield every workflow of the repository."""
    context = context or FetchContext()
    url = (spec or GitHubRestSpec()).action_workflows(owner, repo)
    request = create_github_request(url, token=token)
    async for page in _pages(request, ACTION_WORKFLOWS_SCHEMA, context):
        for workflow in page.workflows:
            yield workflow


async def fetch_releases(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    newer_than: datetime | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubRelease]:
    """Yield releases, newest first, down to ``newer_than`` (by creation time)."""
    context = context or FetchContext()
    request = create_github_request((spec or GitHubRestSpec()).releases(owner, repo), token=token)
    async for releases in _pages(request, RELEASES_SCHEMA, context):
        for release in releases:
            if _older(release.created_at, newer_than):
                logger.debug("Reached release created before {}: {}", newer_than, release.html_url)
                return
            yield release


# ------------------------------------------------------------------------------
# Statistics
# ------------------------------------------------------------------------------
async def _stats(
    owner: str,
    repo: str,
    stat: str,
    schema: Any,
    *,
    token: str | None,
    context: FetchContext | None,
    spec: GitHubRestSpec | None,
) -> AsyncIterator[Any]:
    context = context or FetchContext()
    request = create_github_request((spec or GitHubRestSpec()).stats(owner, repo, stat), token=token)
    async for data in _pages(request, schema, context, strategy=BackoffStrategy.GITHUB):
        if isinstance(data, list):
            for element in data:
                yield element
        else:
            yield data


def fetch_stats_code_frequency(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubStatsCodeFrequency]:
    """Yield weekly ``[week, additions, deletions]`` rows."""
    return _stats(
        owner, repo, "code_frequency", STATS_CODE_FREQUENCY_SCHEMA, token=token, context=context, spec=spec
    )


def fetch_stats_commit_activity(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubStatsCommitActivity]:
    """Yield the last year of commit activity, one element per week."""
    return _stats(
        owner, repo, "commit_activity", STATS_COMMIT_ACTIVITY_SCHEMA, token=token, context=context, spec=spec
    )


def fetch_stats_contributors(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubStatsContributor]:
    """Yield commit activity per contributor."""
    return _stats(
        owner, repo, "contributors", STATS_CONTRIBUTORS_SCHEMA, token=token, context=context, spec=spec
    )


def fetch_stats_participation(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubStatsParticipation]:
    """Yield the single weekly participation object."""
    return _stats(
        owner, repo, "participation", STATS_PARTICIPATION_SCHEMA, token=token, context=context, spec=spec
    )


def fetch_stats_punch_card(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    context: FetchContext | None = None,
    spec: GitHubRestSpec | None = None,
) -> AsyncIterator[GitHubStatsPunchCard]:
    """Yield ``[day, hour, commits]`` rows."""
    return _stats(
        owner, repo, "punch_card", STATS_PUNCH_CARD_SCHEMA, token=token, context=context, spec=spec
    )
