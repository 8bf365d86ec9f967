"""Per-sync fetch settings handed down to resource fetchers."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, replace
from typing import Any

import httpx

from .backoff import BackoffFn, BackoffStrategy
from .executor import FetchResult
from .pagination import (
    DEFAULT_MAX_PAGES,
    DEFAULT_PAGE_RETRIES,
    PaginationCallback,
    fetch_exhaustively,
    next_request_from_link_header,
)
from .progress import ProgressCallback
from .transport import Transport


@dataclass(frozen=True)
class FetchContext:
    """Everything a fetcher needs besides the request itself.

    Usage:
        context = FetchContext(transport=transport, signal=signal)
        async for page in context.fetch_exhaustively(request, list[GitHubPull]):
            ...
    """

    transport: Transport | None = None
    signal: asyncio.Event | None = None
    progress: ProgressCallback | None = None
    retries: int = DEFAULT_PAGE_RETRIES
    max_pages: int = DEFAULT_MAX_PAGES

    def with_progress(self, progress: ProgressCallback | None) -> FetchContext:
        """Copy of this context reporting to ``progress`` instead."""
        return replace(self, progress=progress)

    def fetch_exhaustively(
        self,
        request: httpx.Request,
        schema: Any,
        *,
        pagination_callback: PaginationCallback = next_request_from_link_header,
        strategy: BackoffStrategy | BackoffFn = BackoffStrategy.RATE_LIMIT_AWARE,
        max_pages: int | None = None,
    ) -> AsyncIterator[FetchResult]:
        """Run fetch_exhaustively with this context's transport, signal and limits."""
        return fetch_exhaustively(
            request,
            schema,
            pagination_callback=pagination_callback,
            max_pages=max_pages or self.max_pages,
            retries=self.retries,
            strategy=strategy,
            signal=self.signal,
            progress=self.progress,
            transport=self.transport,
        )
