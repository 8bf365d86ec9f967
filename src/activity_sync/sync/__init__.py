"""Sync orchestration: resource sync clients, fan-out and reporting.

This module provides:
- SyncOrchestrator: concurrent settle-all runs with prerequisites
- SyncEventBus: progress/finished/aborted/warning events
- full_github_sync / full_jira_sync: complete runs with terminal report
"""

from .client import BaseSyncClient, payload_of
from .events import SyncEvent, SyncEventBus, SyncEventCallback, SyncEventKind
from .exceptions import AggregateSyncError
from .handlers import (
    GITHUB_DEPENDENCIES,
    cutoff_for,
    full_github_sync,
    full_jira_sync,
    github_operations,
)
from .orchestrator import SyncOperation, SyncOrchestrator, validate_dependencies
from .report import (
    ALL_SYNCED,
    GITHUB_PROGRESS_DOTS,
    JIRA_PROGRESS_DOTS,
    DotRenderer,
    format_report,
    legend,
)
from .results import (
    SKIPPED_REASON,
    AggregateSyncResult,
    SyncOutcome,
    SyncResult,
    SyncStatus,
)

__all__ = [
    # Clients
    "BaseSyncClient",
    "payload_of",
    # Events
    "SyncEvent",
    "SyncEventBus",
    "SyncEventCallback",
    "SyncEventKind",
    # Orchestration
    "GITHUB_DEPENDENCIES",
    "SyncOperation",
    "SyncOrchestrator",
    "cutoff_for",
    "full_github_sync",
    "full_jira_sync",
    "github_operations",
    "validate_dependencies",
    # Results
    "SKIPPED_REASON",
    "AggregateSyncError",
    "AggregateSyncResult",
    "SyncOutcome",
    "SyncResult",
    "SyncStatus",
    # Report
    "ALL_SYNCED",
    "GITHUB_PROGRESS_DOTS",
    "JIRA_PROGRESS_DOTS",
    "DotRenderer",
    "format_report",
    "legend",
]
