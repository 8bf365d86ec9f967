"""Sync client storing Jira issues of a set of projects in the database."""

from __future__ import annotations

import asyncio
import hashlib
import json
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from activity_sync.config import FetchConfig
from activity_sync.db.repositories import SyncedItemRepository
from activity_sync.fetching.context import FetchContext
from activity_sync.fetching.transport import Transport
from activity_sync.sync.client import BaseSyncClient
from activity_sync.sync.events import SyncEventBus
from activity_sync.sync.results import SyncResult

from . import fetchers
from .fetchers import JiraSearchHit

SEARCH_ISSUES = "search-issues"
SEARCH_NAMES = "search-names"


def names_hash(names: dict[str, str]) -> str:
    """Stable digest of a field-name mapping; pages usually share one mapping."""
    encoded = json.dumps(names, sort_keys=True, separators=(",", ":")).encode()
    return hashlib.sha256(encoded).hexdigest()


class JiraSyncClient(BaseSyncClient):
    """Sync issues of one or more Jira projects.

    Issues are stored by key with a ``namesHash`` pointing at the
    field-name mapping, which is stored once per distinct mapping.

    Usage:
        client = JiraSyncClient(get_session_factory(), ["PROJ"], host=host, user=user, token=token)
        await client.sync_search_issues(newer_than=cutoff, signal=signal)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        project_keys: Sequence[str],
        *,
        host: str,
        user: str,
        token: str,
        events: SyncEventBus | None = None,
        transport: Transport | None = None,
        fetch_config: FetchConfig | None = None,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        if not project_keys:
            raise ValueError("At least one Jira project key is required")
        super().__init__(
            session_factory,
            ",".join(sorted(project_keys)),
            events=events,
            transport=transport,
            fetch_config=fetch_config,
            write_lock=write_lock,
        )
        self.project_keys = list(project_keys)
        self._host = host
        self._user = user
        self._token = token

    async def sync_search_issues(
        self,
        *,
        newer_than: datetime | None = None,
        signal: asyncio.Event | None = None,
    ) -> SyncResult:
        async def upsert(repo: SyncedItemRepository, hit: JiraSearchHit, _: FetchContext) -> None:
            digest = names_hash(hit.names)
            payload = {**hit.issue.to_payload(), "namesHash": digest}
            await repo.upsert(SEARCH_ISSUES, self.scope, str(hit.issue.key), payload)
            if await repo.get(SEARCH_NAMES, self.scope, digest) is None:
                await repo.upsert(SEARCH_NAMES, self.scope, digest, hit.names)

        return await self._sync(
            SEARCH_ISSUES,
            lambda context, window: fetchers.fetch_search_issues(
                self.project_keys,
                host=self._host,
                user=self._user,
                token=self._token,
                newer_than=window,
                context=context,
            ),
            upsert,
            signal=signal,
            newer_than=newer_than,
        )
