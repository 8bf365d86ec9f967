"""GitHub resources.

This module provides:
- GitHubClient: githubkit wrapper for quota and repository lookups
- Fetchers: async generators over every synced GitHub resource
- GitHubSyncClient: stores one repository's resources in the database
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .rest_spec import GitHubRestSpec, create_github_request
from .sync_client import STATS_RESOURCES, GitHubSyncClient

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    # Requests
    "GitHubRestSpec",
    "create_github_request",
    # Sync
    "STATS_RESOURCES",
    "GitHubSyncClient",
]
