"""Jira resources: issue search fetcher and sync client."""

from .fetchers import JiraSearchHit, fetch_search_issues
from .rest_spec import create_search_request, project_jql
from .sync_client import SEARCH_ISSUES, SEARCH_NAMES, JiraSyncClient, names_hash

__all__ = [
    "JiraSearchHit",
    "JiraSyncClient",
    "SEARCH_ISSUES",
    "SEARCH_NAMES",
    "create_search_request",
    "fetch_search_issues",
    "names_hash",
    "project_jql",
]
