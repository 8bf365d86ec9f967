"""Backoff strategies for the request executor.

A backoff function is pure: given the attempt number and either the
response or the error of that attempt, it decides whether (and after
how long) the request should be retried. It performs no I/O and holds
no state.
"""

from __future__ import annotations

import math
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

import httpx


@dataclass(frozen=True)
class BackoffDecision:
    """Outcome of a backoff function.

    A ``delay`` of None means "stop retrying": the executor returns the
    response (or raises the error) as-is.
    """

    reason: str
    delay: float | None = None
    """Seconds to wait before the next attempt."""

    @property
    def should_retry(self) -> bool:
        """Whether the executor is asked to try again."""
        return self.delay is not None


BackoffFn = Callable[..., BackoffDecision]
"""Signature: ``fn(attempt, *, response=None, error=None) -> BackoffDecision``."""


class BackoffStrategy(StrEnum):
    """Backoff strategies selectable per call site."""

    RATE_LIMIT_AWARE = "rate-limit-aware-backoff"
    """Exponential backoff that honours GitHub-style rate limit headers."""

    GITHUB = "github-backoff"
    """Rate limit aware backoff that also waits out 202 (stats still computing)."""


def calculate_exponential_backoff(
    attempt: int,
    *,
    factor: float = 2.0,
    min_timeout: float = 1.0,
    max_timeout: float = math.inf,
    randomize: bool = False,
) -> float:
    """Return the delay in seconds for the given attempt.

    Args:
        attempt: Zero-based attempt number
        factor: The exponential factor
        min_timeout: Seconds before the first retry
        max_timeout: Upper bound for any single delay
        randomize: Multiply by a random factor between 1 and 2

    Returns:
        ``min_timeout * factor ** attempt``, jittered and capped
    """
    jitter = random.random() + 1 if randomize else 1.0
    timeout = jitter * max(min_timeout, 0.001) * math.pow(factor, attempt)
    return max(min(timeout, max_timeout), 0.0)


def _now() -> float:
    return time.time()


def _exponential_delay(attempt: int) -> float:
    # Roughly 50ms, 200ms, 800ms, 3.2s, 12.8s before jitter
    return calculate_exponential_backoff(attempt, factor=4, min_timeout=0.05, randomize=True)


def rate_limit_aware_backoff(
    attempt: int,
    *,
    response: httpx.Response | None = None,
    error: BaseException | None = None,
) -> BackoffDecision:
    """Generic backoff: retry errors and 5xx, honour rate limits, give up on 4xx.

    When an error comes with a response (a body failing validation), a
    non-ok status is still classified by its status code, while an ok
    status is retried like any other error.
    """
    if response is None or (error is not None and response.is_success):
        return BackoffDecision(reason=f"error: {error}", delay=_exponential_delay(attempt))

    if response.is_success:
        return BackoffDecision(reason="ok response")

    status = response.status_code
    if status == 403 and response.headers.get("x-ratelimit-remaining") == "0":
        reset = response.headers.get("x-ratelimit-reset")
        if reset is not None:
            try:
                reset_epoch = float(reset)
            except ValueError:
                reset_epoch = None
            if reset_epoch is not None:
                return BackoffDecision(
                    reason="rate-limited",
                    delay=max(reset_epoch - _now(), 0.0),
                )

    if 400 <= status < 500:
        return BackoffDecision(reason=f"don't retry status code: {status}")

    return BackoffDecision(reason=f"status code: {status}", delay=_exponential_delay(attempt))


def github_backoff(
    attempt: int,
    *,
    response: httpx.Response | None = None,
    error: BaseException | None = None,
) -> BackoffDecision:
    """Backoff for GitHub endpoints that compute their payload in the background.

    Repository statistics are expensive to compute. When they are not
    cached yet GitHub answers 202 and starts a background job; the same
    request succeeds once the job completes.
    https://docs.github.com/en/rest/metrics/statistics#best-practices-for-caching
    """
    if response is not None:
        if response.status_code == 202:
            delay = calculate_exponential_backoff(
                attempt,
                factor=1.5,
                min_timeout=0.5,
                max_timeout=9.0,
                randomize=True,
            )
            return BackoffDecision(reason="202 response", delay=delay)
        if response.status_code == 422:
            return BackoffDecision(reason="unprocessable-entity")
    return rate_limit_aware_backoff(attempt, response=response, error=error)


_STRATEGIES: dict[BackoffStrategy, BackoffFn] = {
    BackoffStrategy.RATE_LIMIT_AWARE: rate_limit_aware_backoff,
    BackoffStrategy.GITHUB: github_backoff,
}


def get_backoff_fn(strategy: BackoffStrategy | BackoffFn) -> BackoffFn:
    """Resolve a strategy tag (or pass through a custom backoff function)."""
    if isinstance(strategy, BackoffStrategy):
        return _STRATEGIES[strategy]
    if callable(strategy):
        return strategy
    raise ValueError(f"Unknown backoff strategy: {strategy!r}")
