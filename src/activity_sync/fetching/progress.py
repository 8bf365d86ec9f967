"""Progress events emitted by the request executor and paginator.

Events are a side channel: they describe what the fetch engine is doing
but never influence it. A failing callback is logged and ignored.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

import httpx

from activity_sync.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchingEvent:
    """An attempt is about to be sent."""

    type: ClassVar[str] = "fetching"
    attempt: int
    retries: int
    request: httpx.Request


@dataclass(frozen=True)
class FetchedEvent:
    """An attempt produced a response that passed decoding and validation."""

    type: ClassVar[str] = "fetched"
    attempt: int
    retries: int
    response: httpx.Response


@dataclass(frozen=True)
class ErrorEvent:
    """An attempt raised (transport failure or validation failure)."""

    type: ClassVar[str] = "error"
    attempt: int
    retries: int
    error: BaseException


@dataclass(frozen=True)
class RetryingEvent:
    """The executor is about to sleep before the next attempt."""

    type: ClassVar[str] = "retrying"
    attempt: int
    retries: int
    delay: float
    reason: str


@dataclass(frozen=True)
class DoneEvent:
    """The executor stopped, returning ``response`` or raising ``error``."""

    type: ClassVar[str] = "done"
    attempt: int
    retries: int
    response: httpx.Response | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class PagingEvent:
    """The paginator is following a continuation to the next page."""

    type: ClassVar[str] = "paging"
    to: httpx.Request
    pages_consumed: int
    max_pages: int


FetchProgress = FetchingEvent | FetchedEvent | ErrorEvent | RetryingEvent | DoneEvent | PagingEvent

ProgressCallback = Callable[[FetchProgress], None]


def emit(callback: ProgressCallback | None, event: FetchProgress) -> None:
    """Deliver an event to a callback, isolating callback failures."""
    if callback is None:
        return
    try:
        callback(event)
    except Exception as e:
        logger.warning("Progress callback failed on {} event: {}", event.type, e)


def log_fetch_progress(event: FetchProgress) -> None:
    """Default progress sink: log paging and retries at debug level."""
    if isinstance(event, PagingEvent):
        logger.debug(
            "paging: {} ({}/{})", event.to.url, event.pages_consumed, event.max_pages
        )
    elif isinstance(event, RetryingEvent):
        logger.debug(
            "retrying in {:.2f}s: {} ({}/{})",
            event.delay,
            event.reason,
            event.attempt,
            event.retries,
        )


def chain_progress(*callbacks: ProgressCallback | None) -> ProgressCallback:
    """Combine several progress callbacks into one, preserving order."""

    def _chained(event: FetchProgress) -> None:
        for callback in callbacks:
            emit(callback, event)

    return _chained
