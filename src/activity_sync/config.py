"""Configuration settings for activity-sync."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FetchConfig(BaseModel):
    """Retry and pagination limits for the fetch engine."""

    page_retries: int = Field(
        default=7,
        ge=0,
        le=20,
        description="Retries per page during exhaustive pagination",
    )
    max_pages: int = Field(
        default=1000,
        ge=1,
        description="Runaway guard for exhaustive pagination",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for a single attempt",
    )


class SyncConfig(BaseModel):
    """What to sync and how far back to look.

    The incremental window starts at the later of the last finished sync
    and ``now - max_days``.
    """

    max_days: int = Field(
        default=90,
        ge=1,
        description="Never look further back than this many days",
    )
    tracked_repos: list[str] = Field(
        default_factory=list,
        description="Repositories (owner/repo) synced by 'sync all'",
    )
    jira_projects: list[str] = Field(
        default_factory=list,
        description="Jira project keys synced by 'sync all'",
    )

    def cutoff(self, now: datetime | None = None) -> datetime:
        """Oldest timestamp a sync may reach back to."""
        return (now or datetime.now(UTC)) - timedelta(days=self.max_days)


class LoggingConfig(BaseModel):
    """Configuration for file logging."""

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Nested values use ``__`` as delimiter, e.g. ``SYNC__MAX_DAYS=30``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./activity_sync.db",
        description="Async SQLite database connection string",
    )

    # --------------------------------------------------------------------------
    # Upstream services
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    jira_host: str = Field(
        default="",
        description="Jira base URL, e.g. https://example.atlassian.net",
    )
    jira_user: str = Field(
        default="",
        description="Jira account email for basic auth",
    )
    jira_token: str = Field(
        default="",
        description="Jira API token for basic auth",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    fetch: FetchConfig = Field(
        default_factory=FetchConfig,
        description="Retry and pagination limits",
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Sync window and tracked scopes",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )

    @property
    def jira_configured(self) -> bool:
        """Whether all Jira credentials are present."""
        return bool(self.jira_host and self.jira_user and self.jira_token)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
