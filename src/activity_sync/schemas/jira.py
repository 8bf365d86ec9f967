"""Pydantic schemas for the Jira REST API v2 search endpoint.

See: https://docs.atlassian.com/software/jira/docs/api/REST/latest/#api/2/search
"""

import re
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from .base import UpstreamModel

_COMPACT_OFFSET = re.compile(r"([+-])(\d{2})(\d{2})$")


class JiraPaginationFields(UpstreamModel):
    """Offset pagination fields shared by Jira list endpoints.

    ``total`` is not returned by every operation and may change while
    pages are being fetched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    start_at: int | None = Field(default=None, alias="startAt")
    max_results: int | None = Field(default=None, alias="maxResults")
    total: int | None = Field(default=None)


class JiraIssueFields(UpstreamModel):
    """The subset of issue fields the sync relies on."""

    updated: datetime | None = Field(default=None, description="Last update timestamp")
    created: datetime | None = Field(default=None, description="Creation timestamp")

    @field_validator("updated", "created", mode="before")
    @classmethod
    def normalize_offset(cls, value: Any) -> Any:
        """Jira writes offsets as ``+0000``; ISO 8601 parsers want ``+00:00``."""
        if isinstance(value, str):
            return _COMPACT_OFFSET.sub(r"\1\2:\3", value)
        return value


class JiraSearchIssue(UpstreamModel):
    """One issue from a search result, with expanded changelog and transitions."""

    id: str | None = Field(default=None, description="Issue ID")
    key: str | None = Field(default=None, description="Issue key, e.g. PROJ-123")
    self_url: str | None = Field(default=None, alias="self")
    fields: JiraIssueFields = Field(default_factory=JiraIssueFields)
    changelog: dict[str, Any] | None = Field(default=None)
    transitions: list[dict[str, Any]] | None = Field(default=None)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class JiraSearchResponse(JiraPaginationFields):
    """Response of POST /rest/api/2/search."""

    expand: str | None = None
    issues: list[JiraSearchIssue] = Field(default_factory=list)
    warning_messages: list[str] | None = Field(default=None, alias="warningMessages")
    names: dict[str, str] | None = Field(default=None, description="Field id to display name")
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
