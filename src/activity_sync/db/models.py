"""SQLAlchemy ORM models for activity-sync."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# ------------------------------------------------------------------------------
# Sync markers
# ------------------------------------------------------------------------------
class SyncRecord(Base):
    """One sync run of one resource within one scope.

    A row is created when the sync starts; ``updated_at`` is only set once
    it finishes, so unfinished (failed, cancelled) runs never move the
    incremental window forward.
    """

    __tablename__ = "sync_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    resource: Mapped[str] = mapped_column(String(100))  # e.g., "pull", "search-issues"
    scope: Mapped[str] = mapped_column(String(200))  # e.g., "owner/repo", "PROJ"
    created_at: Mapped[datetime] = mapped_column(DateTime)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (Index("ix_sync_records_resource_scope", "resource", "scope"),)

    @property
    def is_finished(self) -> bool:
        """Whether the run completed."""
        return self.updated_at is not None

    def __repr__(self) -> str:
        return (
            f"<SyncRecord(id={self.id}, resource='{self.resource}', "
            f"scope='{self.scope}', finished={self.is_finished})>"
        )


# ------------------------------------------------------------------------------
# Synced payloads
# ------------------------------------------------------------------------------
class SyncedItem(Base):
    """A single upstream object (pull, commit, run, issue...) stored as JSON.

    Upserted by ``(resource, scope, key)``. ``parent_key`` links dependent
    items, e.g. a pull-commit to its pull number.
    """

    __tablename__ = "synced_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    resource: Mapped[str] = mapped_column(String(100))
    scope: Mapped[str] = mapped_column(String(200))
    key: Mapped[str] = mapped_column(String(200))  # upstream id, sha, issue key...
    parent_key: Mapped[str | None] = mapped_column(String(200), nullable=True)
    payload: Mapped[dict[str, Any] | list[Any]] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("resource", "scope", "key", name="uq_synced_item_resource_scope_key"),
        Index("ix_synced_items_parent", "resource", "scope", "parent_key"),
    )

    def __repr__(self) -> str:
        return f"<SyncedItem(resource='{self.resource}', scope='{self.scope}', key='{self.key}')>"
