"""Terminal rendering of sync progress and the final report.

Progress is one character per synced element, written as it happens.
The report lists every failed resource with its reason and, when the
failure carries them, the request as a curl command and the response
status line.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TextIO

from .events import SyncEvent, SyncEventBus, SyncEventKind
from .results import AggregateSyncResult

ALL_SYNCED = "✅ "

GITHUB_PROGRESS_DOTS: Mapping[str, str] = {
    "action-run": "r",
    "action-workflow": "w",
    "commit": "c",
    "pull": "p",
    "pull-commit": "p",
    "release": "R",
}
STATS_DOT = "s"

JIRA_PROGRESS_DOTS: Mapping[str, str] = {"search-issues": "s"}


def legend(dots: Mapping[str, str], *, stats: bool = False) -> str:
    """Build the legend line, e.g. ``Legend: r=action-run, p=pull|pull-commit``."""
    grouped: dict[str, list[str]] = {}
    for resource, char in dots.items():
        grouped.setdefault(char, []).append(resource)
    entries = [f"{char}={'|'.join(names)}" for char, names in grouped.items()]
    if stats:
        entries.append(f"{STATS_DOT}=stats")
    return "Legend: " + ", ".join(entries)


class DotRenderer:
    """Write a progress character per sync event.

    Usage:
        renderer = DotRenderer(sys.stdout, GITHUB_PROGRESS_DOTS, stats=True)
        renderer.attach(bus)
        renderer.write_legend()
    """

    def __init__(self, out: TextIO, dots: Mapping[str, str], *, stats: bool = False) -> None:
        self._out = out
        self._dots = dots
        self._stats = stats

    def write_legend(self) -> None:
        self._out.write(legend(self._dots, stats=self._stats) + "\n")
        self._out.flush()

    def attach(self, bus: SyncEventBus) -> None:
        bus.subscribe(self.handle)

    def handle(self, event: SyncEvent) -> None:
        char = self.dot_for(event)
        if char:
            self._out.write(char)
            self._out.flush()

    def dot_for(self, event: SyncEvent) -> str | None:
        if event.kind == SyncEventKind.PROGRESS:
            return self._dots.get(event.resource)
        # Stats are a single element, so they are shown once finished
        if self._stats and event.kind == SyncEventKind.FINISHED and event.resource.startswith("stats-"):
            return STATS_DOT
        return None


def format_report(result: AggregateSyncResult) -> str:
    """Final report: the failure lines, or a check mark when everything synced.

    A cancelled run reports nothing, not even failures from before the
    interrupt.
    """
    if result.cancelled:
        return ""
    if result.has_failures:
        return result.report()
    return ALL_SYNCED
