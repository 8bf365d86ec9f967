"""Repository for SyncedItem payloads."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from activity_sync.db.models import SyncedItem

from .base import BaseRepository


class SyncedItemRepository(BaseRepository[SyncedItem]):
    """Upsert and query synced upstream objects."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SyncedItem)

    async def get(self, resource: str, scope: str, key: str) -> SyncedItem | None:
        """Get one item by its natural key."""
        stmt = select(SyncedItem).where(
            SyncedItem.resource == resource,
            SyncedItem.scope == scope,
            SyncedItem.key == key,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        resource: str,
        scope: str,
        key: str,
        payload: dict[str, Any] | list[Any],
        *,
        parent_key: str | None = None,
    ) -> tuple[SyncedItem, bool]:
        """Insert or replace an item.

        Returns:
            Tuple of (item, created) where created is False for updates
        """
        item = await self.get(resource, scope, key)
        if item is None:
            item = self.add(
                SyncedItem(
                    resource=resource,
                    scope=scope,
                    key=key,
                    parent_key=parent_key,
                    payload=payload,
                )
            )
            await self.flush()
            return item, True

        item.payload = payload
        item.parent_key = parent_key
        await self.flush()
        return item, False

    async def delete_children(self, resource: str, scope: str, parent_key: str) -> int:
        """Delete every item attached to ``parent_key``.

        Used before re-syncing a parent's children so removed children
        (e.g. force-pushed commits) disappear.

        Returns:
            Number of deleted rows
        """
        stmt = delete(SyncedItem).where(
            SyncedItem.resource == resource,
            SyncedItem.scope == scope,
            SyncedItem.parent_key == parent_key,
        )
        cursor_result = await self._session.execute(stmt)
        row_count: int = getattr(cursor_result, "rowcount", 0) or 0
        return row_count

    async def list_items(
        self,
        resource: str,
        scope: str | None = None,
        *,
        parent_key: str | None = None,
        limit: int | None = None,
    ) -> list[SyncedItem]:
        """List items of a resource, optionally filtered by scope and parent."""
        stmt = select(SyncedItem).where(SyncedItem.resource == resource)
        if scope is not None:
            stmt = stmt.where(SyncedItem.scope == scope)
        if parent_key is not None:
            stmt = stmt.where(SyncedItem.parent_key == parent_key)
        stmt = stmt.order_by(SyncedItem.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
