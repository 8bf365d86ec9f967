"""Shared machinery for resource sync clients.

A resource sync:
1. Records a sync marker (start time)
2. Computes the incremental window from the last finished marker
3. Iterates the resource's fetcher, upserting each element and emitting
   a progress event per element
4. Emits ``finished`` and marks the marker finished

If the cancellation signal fires mid-iteration the sync emits
``aborted`` and raises SyncCancelledError; its marker stays unfinished
so the next run starts from the same window.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from activity_sync.config import FetchConfig
from activity_sync.db.repositories import SyncedItemRepository, SyncRecordRepository
from activity_sync.fetching.context import FetchContext
from activity_sync.fetching.exceptions import SyncCancelledError
from activity_sync.fetching.progress import (
    FetchProgress,
    ProgressCallback,
    RetryingEvent,
    chain_progress,
    log_fetch_progress,
)
from activity_sync.fetching.transport import Transport
from activity_sync.logging import bind_resource

from .events import SyncEventBus
from .results import SyncResult

T = TypeVar("T")

ItemsFn = Callable[[FetchContext, datetime | None], AsyncIterator[T]]
UpsertFn = Callable[[SyncedItemRepository, T, FetchContext], Awaitable[None]]


class BaseSyncClient:
    """Base class for clients syncing one upstream scope into the database.

    Concurrency:
        Operations of one client run concurrently. Each database write
        happens in its own short session; the shared write lock keeps
        SQLite writers from interleaving.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        scope: str,
        *,
        events: SyncEventBus | None = None,
        transport: Transport | None = None,
        fetch_config: FetchConfig | None = None,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session_factory: Factory for database sessions
            scope: Scope the synced rows are stored under
            events: Event bus (a private one is created if omitted)
            transport: HTTP transport (httpx if omitted)
            fetch_config: Retry and pagination limits
            write_lock: Lock serializing database writes
        """
        self._session_factory = session_factory
        self.scope = scope
        self.events = events or SyncEventBus()
        self._transport = transport
        self._fetch_config = fetch_config or FetchConfig()
        self._write_lock = write_lock or asyncio.Lock()

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[tuple[SyncRecordRepository, SyncedItemRepository]]:
        async with self._write_lock, self._session_factory() as session:
            try:
                yield SyncRecordRepository(session), SyncedItemRepository(session)
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    def _fetch_progress(self, resource: str) -> ProgressCallback:
        def warn_on_rate_limit(event: FetchProgress) -> None:
            if isinstance(event, RetryingEvent) and event.reason == "rate-limited":
                self.events.warning(resource, "rate-limited", duration=event.delay)

        return chain_progress(log_fetch_progress, warn_on_rate_limit)

    def _fetch_context(self, resource: str, signal: asyncio.Event | None) -> FetchContext:
        return FetchContext(
            transport=self._transport,
            signal=signal,
            progress=self._fetch_progress(resource),
            retries=self._fetch_config.page_retries,
            max_pages=self._fetch_config.max_pages,
        )

    async def _sync(
        self,
        resource: str,
        items: ItemsFn[T],
        upsert: UpsertFn[T],
        *,
        signal: asyncio.Event | None = None,
        newer_than: datetime | None = None,
        keep_items: bool = False,
    ) -> SyncResult:
        """Run one resource sync.

        Args:
            resource: Resource name (marker type and event resource)
            items: Builds the element iterator from (context, window start)
            upsert: Stores one element
            signal: Shared cancellation signal
            newer_than: Oldest timestamp to sync (the max-days cut-off)
            keep_items: Return the synced elements in the result

        Returns:
            SyncResult with the marker's start time

        Raises:
            SyncCancelledError: If the signal fired while iterating
        """
        log = bind_resource(resource, self.scope)
        started_at = datetime.now(UTC)

        async with self._unit_of_work() as (records, _):
            window = await records.newer_than(resource, self.scope, newer_than)
            record = await records.start(resource, self.scope, now=started_at)
            record_id = record.id

        log.info("Syncing{}", f" since {window.isoformat()}" if window else "")
        context = self._fetch_context(resource, signal)
        result = SyncResult(synced_at=started_at)

        async for element in items(context, window):
            if signal is not None and signal.is_set():
                self.events.aborted(resource)
                raise SyncCancelledError()
            async with self._unit_of_work() as (_, repo):
                await upsert(repo, element, context)
            result.count += 1
            if keep_items:
                result.items.append(element)
            self.events.progress(resource)

        self.events.finished(resource)

        async with self._unit_of_work() as (records, _):
            finished = await records.get_by_id(record_id)
            if finished is not None:
                await records.finish(finished)

        log.info("Synced {} element(s)", result.count)
        return result


def payload_of(element: Any) -> Any:
    """JSON payload for a schema instance or a plain value."""
    to_payload = getattr(element, "to_payload", None)
    return to_payload() if callable(to_payload) else element
