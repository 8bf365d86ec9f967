"""Human-readable diagnostics for failed requests.

Provides:
- Schema validation against pydantic types with readable issue paths
- curl reproduction of a request
- Response status lines and error descriptions used in sync reports
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from .exceptions import FetchError, ResponseValidationError

MAX_ISSUES_IN_MESSAGE = 99


@lru_cache(maxsize=128)
def get_type_adapter(schema: Any) -> TypeAdapter[Any]:
    """Get a cached TypeAdapter for a schema (model class, list[...] etc.)."""
    return TypeAdapter(schema)


def _join_path(loc: tuple[int | str, ...]) -> str:
    path = ""
    for item in loc:
        if isinstance(item, int):
            path += f"[{item}]"
        elif item.isidentifier():
            path += f".{item}" if path else item
        else:
            path += '["' + item.replace('"', '\\"') + '"]'
    return path


def stringify_validation_issues(error: ValidationError) -> list[str]:
    """Render each pydantic issue as ``<message> at "<path>"``."""
    issues: list[str] = []
    for issue in error.errors(include_url=False):
        loc = tuple(issue.get("loc", ()))
        message = issue["msg"]
        if not loc:
            text = message
        elif len(loc) == 1 and isinstance(loc[0], int):
            text = f"{message} at index {loc[0]}"
        else:
            text = f'{message} at "{_join_path(loc)}"'
        if text not in issues:
            issues.append(text)
    return issues


def validate_response_data(
    schema: Any,
    data: Any,
    *,
    request: httpx.Request | None = None,
    response: httpx.Response | None = None,
) -> Any:
    """Validate decoded response data, raising ResponseValidationError on mismatch.

    Returns:
        The validated (typed) data
    """
    try:
        return get_type_adapter(schema).validate_python(data)
    except ValidationError as e:
        issues = stringify_validation_issues(e)
        reason = "; ".join(issues[:MAX_ISSUES_IN_MESSAGE])
        message = f"Validation error: {reason}" if reason else "Validation error"
        raise ResponseValidationError(
            message,
            issues=issues,
            data=data,
            request=request,
            response=response,
        ) from e


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON when the content-type says so, else text."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        return json.loads(response.content) if response.content else None
    return response.text


def request_body(request: httpx.Request) -> str | None:
    """Return the request body as text, or None if empty or streamed."""
    try:
        content = request.content
    except httpx.RequestNotRead:
        return None
    return content.decode("utf-8", errors="replace") if content else None


def to_curl_command(request: httpx.Request) -> str:
    """Render a request as a curl command line."""
    command = f"curl -X {request.method.upper()} '{request.url}'"
    for key, value in request.headers.items():
        if key in ("host", "content-length"):
            continue
        command += f" -H '{key}: {value}'"
    body = request_body(request)
    if body:
        command += f" -d '{body}'"
    return command


def status_line(response: httpx.Response) -> str:
    """Return ``<status> <reason phrase>``, e.g. ``202 Accepted``."""
    return f"{response.status_code} {response.reason_phrase}".rstrip()


def describe_error(error: BaseException) -> str:
    """Describe an error for a sync report.

    Validation errors already carry a readable prefix; anything else is
    rendered as ``<ExceptionType>: <message>``.
    """
    if isinstance(error, ResponseValidationError):
        return str(error)
    return f"{type(error).__name__}: {error}"


def error_diagnostics(error: BaseException) -> list[str]:
    """Return indented request/response lines for errors that carry them."""
    if not isinstance(error, FetchError):
        return []
    lines: list[str] = []
    if error.request is not None:
        lines.append(f"  ↳ request: {to_curl_command(error.request)}")
    if error.response is not None:
        lines.append(f"  ↳ response: {status_line(error.response)}")
    return lines
