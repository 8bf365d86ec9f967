"""Exhaustive pagination on top of the request executor.

Pages are fetched strictly one at a time: the continuation for page N+1
is derived from page N, so nothing is prefetched. The returned async
iterator is lazy and single-use.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx

from activity_sync.logging import get_logger

from .backoff import BackoffFn, BackoffStrategy
from .exceptions import PaginationLimitError
from .executor import FetchResult, fetch_with_retry
from .progress import PagingEvent, ProgressCallback, emit
from .transport import Transport

logger = get_logger(__name__)

DEFAULT_MAX_PAGES = 1000
DEFAULT_PAGE_RETRIES = 7

PaginationCallback = Callable[[httpx.Request, httpx.Response, Any], httpx.Request | None]
"""Derive the next request from (previous request, response, data), or None to stop."""

_LINK_PATTERN = re.compile(r'<(.*?)>; rel="(.*?)"')


def parse_link_header(link: str) -> dict[str, str]:
    """Parse an RFC 8288 ``Link`` header into a ``{rel: url}`` mapping."""
    links: dict[str, str] = {}
    for part in link.split(","):
        match = _LINK_PATTERN.search(part.strip())
        if match:
            links[match.group(2)] = match.group(1)
    return links


def _follow(request: httpx.Request, url: str | httpx.URL) -> httpx.Request:
    """Build a new request for ``url`` carrying over method, headers and body."""
    headers = {k: v for k, v in request.headers.items() if k not in ("host", "content-length")}
    return httpx.Request(
        request.method,
        url,
        headers=headers,
        content=request.content or None,
    )


def next_request_from_link_header(
    request: httpx.Request,
    response: httpx.Response,
    data: Any = None,
) -> httpx.Request | None:
    """Continuation following ``Link: <...>; rel="next"`` (GitHub style)."""
    links = parse_link_header(response.headers.get("link", ""))
    next_url = links.get("next")
    if not next_url:
        return None
    return _follow(request, next_url)


def offset_pagination(
    get_request: Callable[[int, int | None], httpx.Request],
) -> PaginationCallback:
    """Continuation from body fields ``startAt``/``maxResults``/``total`` (Jira style).

    Args:
        get_request: Builds the request for a given (start_at, max_results)

    Returns:
        A pagination callback stopping once ``startAt + maxResults >= total``
    """

    def _next(request: httpx.Request, response: httpx.Response, data: Any) -> httpx.Request | None:
        start_at = _field(data, "startAt", "start_at")
        max_results = _field(data, "maxResults", "max_results")
        total = _field(data, "total")
        if start_at is None or not max_results or total is None:
            return None
        cursor = start_at + max_results
        if cursor >= total:
            return None
        return get_request(cursor, max_results)

    return _next


def _field(data: Any, *names: str) -> Any:
    for name in names:
        if isinstance(data, dict) and name in data:
            return data[name]
        if hasattr(data, name):
            return getattr(data, name)
    return None


async def fetch_exhaustively(
    request: httpx.Request,
    schema: Any,
    *,
    pagination_callback: PaginationCallback = next_request_from_link_header,
    max_pages: int = DEFAULT_MAX_PAGES,
    retries: int = DEFAULT_PAGE_RETRIES,
    strategy: BackoffStrategy | BackoffFn = BackoffStrategy.RATE_LIMIT_AWARE,
    signal: asyncio.Event | None = None,
    progress: ProgressCallback | None = None,
    transport: Transport | None = None,
) -> AsyncIterator[FetchResult]:
    """Fetch ``request`` and every continuation page, yielding validated results.

    Args:
        request: The first page request
        schema: Schema each page body must match (see fetch_with_retry)
        pagination_callback: Derives the next request, or None when done
        max_pages: Runaway guard; following more pages raises PaginationLimitError
        retries: Retries per page
        strategy: Backoff strategy for every page
        signal: Shared cancellation signal
        progress: Optional progress callback
        transport: Optional transport (defaults to httpx)

    Yields:
        FetchResult per page, in order
    """
    current: httpx.Request | None = request
    pages_consumed = 0

    while current is not None:
        result = await fetch_with_retry(
            current,
            schema=schema,
            retries=retries,
            strategy=strategy,
            signal=signal,
            progress=progress,
            transport=transport,
        )
        pages_consumed += 1
        yield result

        next_request = pagination_callback(current, result.response, result.data)
        if next_request is None:
            break
        if pages_consumed >= max_pages:
            raise PaginationLimitError(
                f"cannot fetch more than {max_pages} pages exhaustively",
                request=next_request,
                response=result.response,
            )
        emit(
            progress,
            PagingEvent(to=next_request, pages_consumed=pages_consumed, max_pages=max_pages),
        )
        logger.debug("Fetched page {} via {}", pages_consumed, current.url)
        current = next_request
