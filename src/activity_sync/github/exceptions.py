"""GitHub client exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when no token is configured or the token is rejected (401)."""

    pass


class GitHubRateLimitError(GitHubClientError):
    """Raised when the quota is exhausted (403 with x-ratelimit-remaining: 0)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when a repository is not found (404)."""

    pass
