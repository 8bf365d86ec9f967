"""Base schema for upstream API payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class UpstreamModel(BaseModel):
    """Base class for schemas of upstream API responses.

    Unknown fields are kept so the stored payload is the full upstream
    object, not just the fields we validate.
    """

    model_config = ConfigDict(extra="allow")

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible payload to persist."""
        return self.model_dump(mode="json")
