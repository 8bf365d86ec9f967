"""Repositories encapsulating database access for sync markers and items."""

from .base import BaseRepository
from .sync_record import SyncRecordRepository
from .synced_item import SyncedItemRepository

__all__ = [
    "BaseRepository",
    "SyncRecordRepository",
    "SyncedItemRepository",
]
