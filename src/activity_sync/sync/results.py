"""Result objects for sync runs.

A SyncResult is what one resource sync returns. The orchestrator wraps
each in a SyncOutcome and collects them in an AggregateSyncResult used
for the final report and the process exit status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from activity_sync.fetching.diagnostics import describe_error, error_diagnostics

SKIPPED_REASON = "pending"


@dataclass
class SyncResult:
    """Result of syncing one resource."""

    synced_at: datetime
    """Start time of the sync run (the next incremental window starts here)."""

    count: int = 0
    """Number of elements upserted."""

    items: list[Any] = field(default_factory=list)
    """Synced elements, for resources other syncs depend on (pulls)."""

    def to_dict(self) -> dict[str, object]:
        return {"synced_at": self.synced_at.isoformat(), "count": self.count}


class SyncStatus(StrEnum):
    """Lifecycle of one resource within a run."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass
class SyncOutcome:
    """Outcome of one named sync operation."""

    resource: str
    status: SyncStatus = SyncStatus.PENDING
    result: Any = None
    error: BaseException | None = None

    skipped: bool = False
    """True if never invoked because its prerequisite failed."""

    @property
    def failed(self) -> bool:
        """Whether this outcome counts as a failure."""
        return self.status == SyncStatus.ERROR

    @property
    def reason(self) -> str | None:
        """Human-readable failure reason."""
        if self.skipped:
            return SKIPPED_REASON
        if self.error is not None:
            return describe_error(self.error)
        return None

    def report_lines(self) -> list[str]:
        """Report lines for a failed outcome (empty otherwise)."""
        if not self.failed:
            return []
        lines = [f"❌  {self.resource} failed to sync, reason: {self.reason}"]
        if self.error is not None:
            lines.extend(error_diagnostics(self.error))
        return lines

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"resource": self.resource, "status": self.status.value}
        if isinstance(self.result, SyncResult):
            data["result"] = self.result.to_dict()
        if self.failed:
            data["reason"] = self.reason
            data["skipped"] = self.skipped
        return data

    @classmethod
    def from_skipped(cls, resource: str) -> SyncOutcome:
        """Outcome of a dependent that was never invoked."""
        return cls(resource=resource, status=SyncStatus.ERROR, skipped=True)


@dataclass
class AggregateSyncResult:
    """Snapshot of every outcome after all operations settled.

    ``outcomes`` keeps the declaration order of the operations, so the
    report is deterministic regardless of completion order.
    """

    outcomes: dict[str, SyncOutcome] = field(default_factory=dict)

    cancelled: bool = False
    """True if the shared cancellation signal fired during the run."""

    def __getitem__(self, resource: str) -> SyncOutcome:
        return self.outcomes[resource]

    @property
    def succeeded(self) -> list[str]:
        return [name for name, o in self.outcomes.items() if o.status == SyncStatus.SUCCESS]

    @property
    def failed(self) -> list[str]:
        return [name for name, o in self.outcomes.items() if o.failed]

    @property
    def has_failures(self) -> bool:
        return any(o.failed for o in self.outcomes.values())

    def report(self) -> str:
        """Newline-joined failure lines in declaration order."""
        lines: list[str] = []
        for outcome in self.outcomes.values():
            lines.extend(outcome.report_lines())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        return {
            "cancelled": self.cancelled,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [o.to_dict() for o in self.outcomes.values()],
        }
