"""Sync orchestration exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .results import AggregateSyncResult


class AggregateSyncError(Exception):
    """Raised when at least one resource failed to sync.

    The message is the per-resource failure report; the full snapshot is
    available as ``result``.
    """

    def __init__(self, result: AggregateSyncResult) -> None:
        super().__init__(result.report())
        self.result = result
