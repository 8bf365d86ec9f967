"""Fetch engine exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class FetchError(Exception):
    """Base exception for fetch engine errors.

    Carries the request (and response, when one was received) so that
    terminal failures can be reported with enough context to reproduce.
    """

    def __init__(
        self,
        message: str,
        *,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.request = request
        self.response = response


class TransportError(FetchError):
    """Raised when the transport fails to produce a response (DNS, reset, timeout)."""

    pass


class ResponseValidationError(FetchError):
    """Raised when a response body does not match the expected schema.

    Some endpoints answer with a placeholder body (e.g. an empty object
    instead of a list) while a background job computes the real result,
    so this error is retried exactly like a transport error.
    """

    def __init__(
        self,
        message: str,
        *,
        issues: list[str],
        data: Any,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message, request=request, response=response)
        self.issues = issues
        self.data = data


class UnexpectedResponseError(FetchError):
    """Raised when a fetcher receives a final non-2xx response."""

    pass


class PaginationLimitError(FetchError):
    """Raised when exhaustive pagination would exceed its page cap."""

    pass


class SyncCancelledError(Exception):
    """Raised when the shared cancellation signal fires.

    Not a FetchError: cancellation is never reported as a resource failure.
    """

    def __init__(self, message: str = "sync cancelled") -> None:
        super().__init__(message)
