"""Resilient fetch engine: backoff, retrying executor and exhaustive paginator."""

from .backoff import (
    BackoffDecision,
    BackoffFn,
    BackoffStrategy,
    calculate_exponential_backoff,
    get_backoff_fn,
    github_backoff,
    rate_limit_aware_backoff,
)
from .context import FetchContext
from .diagnostics import (
    describe_error,
    error_diagnostics,
    status_line,
    to_curl_command,
    validate_response_data,
)
from .exceptions import (
    FetchError,
    PaginationLimitError,
    ResponseValidationError,
    SyncCancelledError,
    TransportError,
    UnexpectedResponseError,
)
from .executor import FetchResult, cancellable_sleep, ensure_success, fetch_with_retry
from .pagination import (
    fetch_exhaustively,
    next_request_from_link_header,
    offset_pagination,
    parse_link_header,
)
from .progress import (
    DoneEvent,
    ErrorEvent,
    FetchedEvent,
    FetchingEvent,
    FetchProgress,
    PagingEvent,
    ProgressCallback,
    RetryingEvent,
    chain_progress,
    log_fetch_progress,
)
from .transport import HttpxTransport, Transport

__all__ = [
    # Backoff
    "BackoffDecision",
    "BackoffFn",
    "BackoffStrategy",
    "calculate_exponential_backoff",
    "get_backoff_fn",
    "github_backoff",
    "rate_limit_aware_backoff",
    # Executor / paginator
    "FetchContext",
    "FetchResult",
    "cancellable_sleep",
    "ensure_success",
    "fetch_exhaustively",
    "fetch_with_retry",
    "next_request_from_link_header",
    "offset_pagination",
    "parse_link_header",
    # Progress
    "DoneEvent",
    "ErrorEvent",
    "FetchProgress",
    "FetchedEvent",
    "FetchingEvent",
    "PagingEvent",
    "ProgressCallback",
    "RetryingEvent",
    "chain_progress",
    "log_fetch_progress",
    # Transport
    "HttpxTransport",
    "Transport",
    # Diagnostics
    "describe_error",
    "error_diagnostics",
    "status_line",
    "to_curl_command",
    "validate_response_data",
    # Errors
    "FetchError",
    "PaginationLimitError",
    "ResponseValidationError",
    "SyncCancelledError",
    "TransportError",
    "UnexpectedResponseError",
]
