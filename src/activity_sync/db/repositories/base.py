"""Base repository for async SQLAlchemy sessions."""

from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from activity_sync.db.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Common session handling shared by all repositories.

    Usage:
        class SyncRecordRepository(BaseRepository[SyncRecord]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, SyncRecord)

    The caller owns the session and commits it.
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelT]) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The model class this repository manages
        """
        self._session = session
        self._model_class = model_class

    @property
    def session(self) -> AsyncSession:
        """Access the underlying session."""
        return self._session

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get an entity by primary key."""
        return await self._session.get(self._model_class, id)

    async def count(self) -> int:
        """Count rows of this model."""
        stmt = select(func.count()).select_from(self._model_class)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    def add(self, entity: ModelT) -> ModelT:
        """Add an entity to the session (no flush)."""
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        """Flush pending changes."""
        await self._session.flush()
