"""Sync-level events and the bus that fans them out to subscribers.

Events are observational. A subscriber that raises is logged and
skipped; it never affects the sync that emitted the event.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from activity_sync.logging import get_logger

logger = get_logger(__name__)


class SyncEventKind(StrEnum):
    """What happened to a resource sync."""

    PROGRESS = "progress"
    """One element was synced."""

    FINISHED = "finished"
    """The sync completed."""

    ABORTED = "aborted"
    """The sync noticed the cancellation signal and is unwinding."""

    WARNING = "warning"
    """Something worth telling the user, e.g. a rate limit wait."""


@dataclass(frozen=True)
class SyncEvent:
    """An event emitted by a sync client."""

    kind: SyncEventKind
    resource: str
    category: str | None = None
    """Warning category, e.g. ``rate-limited``."""

    duration: float | None = None
    """Seconds, for warnings that involve waiting."""


SyncEventCallback = Callable[[SyncEvent], None]


class SyncEventBus:
    """Observable event channel shared by sync clients and renderers.

    Usage:
        bus = SyncEventBus()
        bus.on(SyncEventKind.PROGRESS, lambda event: print(event.resource))
        bus.emit(SyncEvent(SyncEventKind.PROGRESS, "pull"))
    """

    def __init__(self) -> None:
        self._callbacks: list[tuple[SyncEventKind | None, SyncEventCallback]] = []

    def on(self, kind: SyncEventKind, callback: SyncEventCallback) -> None:
        """Subscribe to one kind of event."""
        self._callbacks.append((kind, callback))

    def subscribe(self, callback: SyncEventCallback) -> None:
        """Subscribe to every event."""
        self._callbacks.append((None, callback))

    def emit(self, event: SyncEvent) -> None:
        """Deliver an event to matching subscribers in subscription order."""
        for kind, callback in self._callbacks:
            if kind is not None and kind != event.kind:
                continue
            try:
                callback(event)
            except Exception as e:
                logger.warning("Sync event callback error on {} {}: {}", event.kind, event.resource, e)

    def progress(self, resource: str) -> None:
        self.emit(SyncEvent(SyncEventKind.PROGRESS, resource))

    def finished(self, resource: str) -> None:
        self.emit(SyncEvent(SyncEventKind.FINISHED, resource))

    def aborted(self, resource: str) -> None:
        self.emit(SyncEvent(SyncEventKind.ABORTED, resource))

    def warning(self, resource: str, category: str, duration: float | None = None) -> None:
        self.emit(SyncEvent(SyncEventKind.WARNING, resource, category=category, duration=duration))
