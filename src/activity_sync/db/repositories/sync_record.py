"""Repository for SyncRecord sync markers."""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from activity_sync.db.models import SyncRecord

from .base import BaseRepository


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class SyncRecordRepository(BaseRepository[SyncRecord]):
    """Start, finish and look up sync runs per (resource, scope).

    The latest *finished* run defines where the next incremental sync
    starts.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SyncRecord)

    async def start(self, resource: str, scope: str, now: datetime | None = None) -> SyncRecord:
        """Record the start of a sync run.

        Args:
            resource: Resource name
            scope: Scope (repository full name, Jira project...)
            now: Start time (defaults to current UTC time)

        Returns:
            The new, unfinished record
        """
        record = SyncRecord(
            resource=resource,
            scope=scope,
            created_at=now or datetime.now(UTC),
        )
        self.add(record)
        await self.flush()
        return record

    async def finish(self, record: SyncRecord, now: datetime | None = None) -> SyncRecord:
        """Mark a sync run as finished."""
        record.updated_at = now or datetime.now(UTC)
        await self.flush()
        return record

    async def latest(self, resource: str, scope: str) -> SyncRecord | None:
        """Get the most recently started finished run, if any."""
        stmt = (
            select(SyncRecord)
            .where(
                SyncRecord.resource == resource,
                SyncRecord.scope == scope,
                SyncRecord.updated_at.is_not(None),
            )
            .order_by(SyncRecord.created_at.desc(), SyncRecord.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def newer_than(
        self,
        resource: str,
        scope: str,
        cutoff: datetime | None = None,
    ) -> datetime | None:
        """Start of the incremental window.

        Returns the later of the last finished run's start and ``cutoff``,
        whichever of the two exists, or None for a full sync.
        """
        latest = await self.latest(resource, scope)
        if latest is None:
            return _as_utc(cutoff) if cutoff is not None else None
        started = _as_utc(latest.created_at)
        if cutoff is None:
            return started
        return max(started, _as_utc(cutoff))
