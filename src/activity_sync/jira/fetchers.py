"""Async generator over Jira search results."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from datetime import datetime

import httpx

from activity_sync.fetching.context import FetchContext
from activity_sync.fetching.executor import ensure_success
from activity_sync.fetching.pagination import offset_pagination
from activity_sync.logging import get_logger
from activity_sync.schemas.jira import JiraSearchIssue

from .rest_spec import SEARCH_SCHEMA, create_search_request, project_jql

logger = get_logger(__name__)


@dataclass(frozen=True)
class JiraSearchHit:
    """One issue together with the field-name mapping of its page."""

    issue: JiraSearchIssue
    names: dict[str, str]


async def fetch_search_issues(
    project_keys: Sequence[str],
    *,
    host: str,
    user: str,
    token: str,
    newer_than: datetime | None = None,
    context: FetchContext | None = None,
) -> AsyncIterator[JiraSearchHit]:
    """Yield issues of the projects, most recently updated first, down to ``newer_than``.

    Args:
        project_keys: Jira project keys, e.g. ``["PROJ", "OPS"]``
        host: Jira base URL
        user: Account used for basic auth
        token: API token of that account
        newer_than: Stop at the first issue updated before this time
        context: Fetch settings (transport, signal, limits)
    """
    context = context or FetchContext()
    jql = project_jql(project_keys)

    def get_request(start_at: int, max_results: int | None) -> httpx.Request:
        return create_search_request(
            host, user, token, jql, start_at=start_at, max_results=max_results
        )

    request = create_search_request(host, user, token, jql)
    async for result in context.fetch_exhaustively(
        request, SEARCH_SCHEMA, pagination_callback=offset_pagination(get_request)
    ):
        page = ensure_success(result).data
        names = page.names or {}
        for issue in page.issues:
            updated = issue.fields.updated
            if newer_than is not None and updated is not None and updated < newer_than:
                logger.debug("Reached issue not updated since {}: {}", newer_than, issue.key)
                return
            yield JiraSearchHit(issue=issue, names=names)
