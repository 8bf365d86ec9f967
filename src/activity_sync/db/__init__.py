"""Database module for activity-sync."""

from activity_sync.db.engine import (
    create_tables,
    dispose_engine,
    get_engine,
    get_session,
    get_session_factory,
)
from activity_sync.db.models import Base, SyncedItem, SyncRecord
from activity_sync.db.repositories import (
    BaseRepository,
    SyncedItemRepository,
    SyncRecordRepository,
)

__all__ = [
    # Models
    "Base",
    "SyncRecord",
    "SyncedItem",
    # Engine
    "create_tables",
    "dispose_engine",
    "get_engine",
    "get_session",
    "get_session_factory",
    # Repositories
    "BaseRepository",
    "SyncRecordRepository",
    "SyncedItemRepository",
]
