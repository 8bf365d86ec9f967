"""Sync client storing one GitHub repository's activity in the database."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from activity_sync.config import FetchConfig
from activity_sync.db.repositories import SyncedItemRepository
from activity_sync.fetching.context import FetchContext
from activity_sync.fetching.transport import Transport
from activity_sync.schemas.github import (
    GitHubActionRun,
    GitHubActionWorkflow,
    GitHubCommit,
    GitHubPull,
    GitHubRelease,
    GitHubStatsCommitActivity,
    GitHubStatsContributor,
)
from activity_sync.sync.client import BaseSyncClient, payload_of
from activity_sync.sync.events import SyncEventBus
from activity_sync.sync.results import SyncResult

from . import fetchers
from .rest_spec import GitHubRestSpec

STATS_RESOURCES = (
    "stats-code-frequency",
    "stats-commit-activity",
    "stats-contributors",
    "stats-participation",
    "stats-punch-card",
)


class GitHubSyncClient(BaseSyncClient):
    """Sync pulls, commits, CI runs, releases and statistics of one repository.

    Usage:
        client = GitHubSyncClient(get_session_factory(), "octocat", "hello-world", token=token)
        pulls = await client.sync_pulls(newer_than=cutoff, signal=signal)
        await client.sync_pull_commits(pulls.items, signal=signal)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        events: SyncEventBus | None = None,
        transport: Transport | None = None,
        fetch_config: FetchConfig | None = None,
        spec: GitHubRestSpec | None = None,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(
            session_factory,
            f"{owner}/{repo}",
            events=events,
            transport=transport,
            fetch_config=fetch_config,
            write_lock=write_lock,
        )
        self.owner = owner
        self.repo = repo
        self._token = token
        self._spec = spec or GitHubRestSpec()

    @property
    def repo_html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"

    def _kwargs(self, context: FetchContext) -> dict[str, Any]:
        return {"token": self._token, "context": context, "spec": self._spec}

    async def _store(
        self,
        repo: SyncedItemRepository,
        resource: str,
        key: str,
        element: Any,
        parent_key: str | None = None,
    ) -> None:
        await repo.upsert(resource, self.scope, key, payload_of(element), parent_key=parent_key)

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------
    async def sync_pulls(
        self,
        *,
        newer_than: datetime | None = None,
        signal: asyncio.Event | None = None,
    ) -> SyncResult:
        """Sync pulls; the result carries the synced pulls for sync_pull_commits."""

        async def upsert(repo: SyncedItemRepository, pull: GitHubPull, _: FetchContext) -> None:
            await self._store(repo, "pull", str(pull.number), pull)

        return await self._sync(
            "pull",
            lambda context, window: fetchers.fetch_pulls(
                self.owner, self.repo, newer_than=window, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
            newer_than=newer_than,
            keep_items=True,
        )

    async def sync_pull_commits(
        self,
        pulls: list[GitHubPull] | SyncResult,
        *,
        signal: asyncio.Event | None = None,
    ) -> SyncResult:
        """Replace the stored commits of exactly the given pulls."""
        if isinstance(pulls, SyncResult):
            pulls = pulls.items

        # Network work stays outside the write lock
        async def iterate(context: FetchContext, window: datetime | None) -> Any:
            for pull in pulls:
                commits: list[GitHubCommit] = [
                    commit async for commit in fetchers.fetch_pull_commits(pull, **self._kwargs(context))
                ]
                yield pull, commits

        async def upsert(
            repo: SyncedItemRepository,
            pull_commits: tuple[GitHubPull, list[GitHubCommit]],
            _: FetchContext,
        ) -> None:
            pull, commits = pull_commits
            parent_key = str(pull.number)
            await repo.delete_children("pull-commit", self.scope, parent_key)
            for commit in commits:
                await self._store(
                    repo, "pull-commit", f"{pull.number}:{commit.sha}", commit, parent_key=parent_key
                )

        return await self._sync("pull-commit", iterate, upsert, signal=signal)

    async def sync_commits(
        self,
        *,
        newer_than: datetime | None = None,
        signal: asyncio.Event | None = None,
    ) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, commit: GitHubCommit, _: FetchContext) -> None:
            await self._store(repo, "commit", commit.sha, commit)

        return await self._sync(
            "commit",
            lambda context, window: fetchers.fetch_commits(
                self.owner, self.repo, newer_than=window, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
            newer_than=newer_than,
        )

    async def sync_action_runs(
        self,
        *,
        newer_than: datetime | None = None,
        signal: asyncio.Event | None = None,
    ) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, run: GitHubActionRun, _: FetchContext) -> None:
            await self._store(repo, "action-run", str(run.id), run)

        return await self._sync(
            "action-run",
            lambda context, window: fetchers.fetch_action_runs(
                self.owner, self.repo, newer_than=window, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
            newer_than=newer_than,
        )

    async def sync_action_workflows(self, *, signal: asyncio.Event | None = None) -> SyncResult:
        async def upsert(
            repo: SyncedItemRepository, workflow: GitHubActionWorkflow, _: FetchContext
        ) -> None:
            await self._store(repo, "action-workflow", str(workflow.id), workflow)

        return await self._sync(
            "action-workflow",
            lambda context, window: fetchers.fetch_action_workflows(
                self.owner, self.repo, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
        )

    async def sync_releases(
        self,
        *,
        newer_than: datetime | None = None,
        signal: asyncio.Event | None = None,
    ) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, release: GitHubRelease, _: FetchContext) -> None:
            await self._store(repo, "release", str(release.id), release)

        return await self._sync(
            "release",
            lambda context, window: fetchers.fetch_releases(
                self.owner, self.repo, newer_than=window, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
            newer_than=newer_than,
        )

    # -------------------------------------------------------------------------
    # Statistics (always a full snapshot)
    # -------------------------------------------------------------------------
    async def sync_stats_code_frequency(self, *, signal: asyncio.Event | None = None) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, row: list[int], _: FetchContext) -> None:
            await self._store(repo, "stats-code-frequency", str(row[0]), row)

        return await self._sync(
            "stats-code-frequency",
            lambda context, window: fetchers.fetch_stats_code_frequency(
                self.owner, self.repo, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
        )

    async def sync_stats_commit_activity(self, *, signal: asyncio.Event | None = None) -> SyncResult:
        async def upsert(
            repo: SyncedItemRepository, week: GitHubStatsCommitActivity, _: FetchContext
        ) -> None:
            await self._store(repo, "stats-commit-activity", str(week.week), week)

        return await self._sync(
            "stats-commit-activity",
            lambda context, window: fetchers.fetch_stats_commit_activity(
                self.owner, self.repo, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
        )

    async def sync_stats_contributors(self, *, signal: asyncio.Event | None = None) -> SyncResult:
        ghosts = 0

        async def upsert(
            repo: SyncedItemRepository, contributor: GitHubStatsContributor, _: FetchContext
        ) -> None:
            nonlocal ghosts
            # Deleted accounts come back without an author
            if contributor.author is not None:
                key = contributor.author.login
            else:
                key = f"ghost-{ghosts}"
                ghosts += 1
            await self._store(repo, "stats-contributors", key, contributor)

        return await self._sync(
            "stats-contributors",
            lambda context, window: fetchers.fetch_stats_contributors(
                self.owner, self.repo, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
        )

    async def sync_stats_participation(self, *, signal: asyncio.Event | None = None) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, participation: Any, _: FetchContext) -> None:
            await self._store(repo, "stats-participation", "participation", participation)

        return await self._sync(
            "stats-participation",
            lambda context, window: fetchers.fetch_stats_participation(
                self.owner, self.repo, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
        )

    async def sync_stats_punch_card(self, *, signal: asyncio.Event | None = None) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, row: list[int], _: FetchContext) -> None:
            await self._store(repo, "stats-punch-card", f"{row[0]}-{row[1]}", row)

        return await self._sync(
            "stats-punch-card",
            lambda context, window: fetchers.fetch_stats_punch_card(
                self.owner, self.repo, **self._kwargs(context)
            ),
            upsert,
            signal=signal,
        )
