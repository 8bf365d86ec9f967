"""Request executor - one logical HTTP request with retry.

Each call owns its attempt counter; nothing is shared between calls, so
concurrency comes from callers running several executors at once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx

from activity_sync.logging import get_logger

from .backoff import BackoffDecision, BackoffFn, BackoffStrategy, get_backoff_fn
from .diagnostics import decode_body, validate_response_data
from .exceptions import SyncCancelledError, UnexpectedResponseError
from .progress import (
    DoneEvent,
    ErrorEvent,
    FetchedEvent,
    FetchingEvent,
    ProgressCallback,
    RetryingEvent,
    emit,
)
from .transport import HttpxTransport, Transport

logger = get_logger(__name__)

DEFAULT_RETRIES = 3


@dataclass(frozen=True)
class FetchResult:
    """A response together with its decoded (and validated, if a schema was given) body."""

    response: httpx.Response
    data: Any
    request: httpx.Request | None = None


def ensure_success(result: FetchResult) -> FetchResult:
    """Raise UnexpectedResponseError for a final non-2xx response."""
    response = result.response
    request = result.request
    if not response.is_success:
        url = request.url if request is not None else ""
        raise UnexpectedResponseError(
            f"{response.status_code} {response.reason_phrase} ({url}): {response.text}",
            request=request,
            response=response,
        )
    return result


async def cancellable_sleep(delay: float, signal: asyncio.Event | None = None) -> None:
    """Sleep for ``delay`` seconds, raising SyncCancelledError if ``signal`` fires first."""
    if signal is None:
        await asyncio.sleep(delay)
        return
    if signal.is_set():
        raise SyncCancelledError()
    try:
        await asyncio.wait_for(signal.wait(), timeout=delay)
    except TimeoutError:
        return
    raise SyncCancelledError()


def _raise_if_cancelled(signal: asyncio.Event | None) -> None:
    if signal is not None and signal.is_set():
        raise SyncCancelledError()


async def fetch_with_retry(
    request: httpx.Request,
    *,
    schema: Any = None,
    retries: int = DEFAULT_RETRIES,
    strategy: BackoffStrategy | BackoffFn = BackoffStrategy.RATE_LIMIT_AWARE,
    signal: asyncio.Event | None = None,
    progress: ProgressCallback | None = None,
    transport: Transport | None = None,
) -> FetchResult:
    """Execute a request, retrying as directed by the backoff strategy.

    Args:
        request: The request to send (never mutated)
        schema: Optional pydantic-compatible type a 2xx body must match.
                A mismatch is retried like a transport error; error
                bodies of non-2xx responses are left as decoded.
        retries: Maximum number of retries after the initial attempt
        strategy: Backoff strategy tag or a custom backoff function
        signal: Shared cancellation signal, checked before each attempt
                and raced against every backoff sleep
        progress: Optional progress callback (observational only)
        transport: Async callable sending the request. Defaults to httpx.

    Returns:
        FetchResult with the final response and its data. When retries are
        exhausted on a non-ok response, that last response is returned.

    Raises:
        SyncCancelledError: If the signal fired
        Exception: The last error (transport or validation) once retries
                   are exhausted or the strategy gives up
    """
    if transport is None:
        async with HttpxTransport() as default_transport:
            return await fetch_with_retry(
                request,
                schema=schema,
                retries=retries,
                strategy=strategy,
                signal=signal,
                progress=progress,
                transport=default_transport,
            )

    backoff = get_backoff_fn(strategy)
    attempt = -1

    while True:
        attempt += 1
        _raise_if_cancelled(signal)
        emit(progress, FetchingEvent(attempt=attempt, retries=retries, request=request))
        logger.debug("fetching {} (attempt {})", request.url, attempt)

        response: httpx.Response | None = None
        try:
            response = await transport(request)
            data = decode_body(response)
            if schema is not None and response.is_success:
                data = validate_response_data(
                    schema, data, request=request, response=response
                )
        except SyncCancelledError:
            raise
        except Exception as error:
            emit(progress, ErrorEvent(attempt=attempt, retries=retries, error=error))
            if signal is not None and signal.is_set():
                raise SyncCancelledError() from error
            decision = backoff(attempt, response=response, error=error)
            logger.debug(
                "backoff from error returned delay {} with reason: {}",
                decision.delay,
                decision.reason,
            )
            if decision.delay is None or attempt >= retries:
                emit(progress, DoneEvent(attempt=attempt, retries=retries, error=error))
                raise
            await _wait(decision, attempt, retries, signal, progress)
            continue

        emit(progress, FetchedEvent(attempt=attempt, retries=retries, response=response))
        decision = backoff(attempt, response=response)
        logger.debug(
            "backoff from response returned delay {} with reason: {}",
            decision.delay,
            decision.reason,
        )
        if decision.delay is None or attempt >= retries:
            emit(progress, DoneEvent(attempt=attempt, retries=retries, response=response))
            return FetchResult(response=response, data=data, request=request)
        await _wait(decision, attempt, retries, signal, progress)


async def _wait(
    decision: BackoffDecision,
    attempt: int,
    retries: int,
    signal: asyncio.Event | None,
    progress: ProgressCallback | None,
) -> None:
    delay = decision.delay or 0.0
    if decision.reason == "rate-limited":
        logger.warning("Rate limited, waiting {:.0f}s for quota reset", delay)
    emit(
        progress,
        RetryingEvent(
            attempt=attempt,
            retries=retries,
            delay=delay,
            reason=decision.reason,
        ),
    )
    await cancellable_sleep(delay, signal)
