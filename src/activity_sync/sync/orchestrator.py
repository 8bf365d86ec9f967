"""Run several named sync operations concurrently and report per resource.

Every operation runs to completion (settle-all): one failing resource
never stops the others. An operation may declare a prerequisite; it
then waits for that prerequisite and receives its result, and is never
invoked if the prerequisite did not succeed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from activity_sync.fetching.exceptions import SyncCancelledError
from activity_sync.logging import bind_resource, get_logger

from .exceptions import AggregateSyncError
from .results import AggregateSyncResult, SyncOutcome, SyncStatus

logger = get_logger(__name__)

SyncOperation = Callable[..., Awaitable[Any]]
"""``op()`` for independent resources, ``op(prerequisite_result)`` for dependents."""


def validate_dependencies(
    operations: Mapping[str, SyncOperation],
    dependencies: Mapping[str, str],
) -> None:
    """Check that the dependency graph only names known resources and has no cycles.

    Raises:
        ValueError: On an unknown resource or a cycle
    """
    for resource, prerequisite in dependencies.items():
        if resource not in operations:
            raise ValueError(f"Unknown resource with a prerequisite: {resource}")
        if prerequisite not in operations:
            raise ValueError(f"Unknown prerequisite for {resource}: {prerequisite}")

    for start in dependencies:
        seen = [start]
        current = dependencies.get(start)
        while current is not None:
            if current in seen:
                cycle = " -> ".join([*seen, current])
                raise ValueError(f"Dependency cycle: {cycle}")
            seen.append(current)
            current = dependencies.get(current)


class SyncOrchestrator:
    """Fan out sync operations and collect their outcomes.

    Usage:
        orchestrator = SyncOrchestrator(signal=signal)
        result = await orchestrator.run(
            {"pull": client.sync_pulls, "pull-commit": client.sync_pull_commits},
            dependencies={"pull-commit": "pull"},
        )

    ``outcomes`` is live while a run is in flight: every resource starts
    PENDING and moves to SUCCESS, ERROR or CANCELLED exactly once.
    """

    def __init__(self, signal: asyncio.Event | None = None) -> None:
        """Initialize the orchestrator.

        Args:
            signal: Shared cancellation signal also handed to the operations
        """
        self._signal = signal
        self.outcomes: dict[str, SyncOutcome] = {}

    @property
    def cancelled(self) -> bool:
        return self._signal is not None and self._signal.is_set()

    async def run(
        self,
        operations: Mapping[str, SyncOperation],
        dependencies: Mapping[str, str] | None = None,
        *,
        raise_on_failure: bool = True,
    ) -> AggregateSyncResult:
        """Run every operation concurrently and wait for all of them.

        Args:
            operations: Resource name to operation, in report order
            dependencies: Resource name to the resource it waits for
            raise_on_failure: Raise AggregateSyncError when a resource failed

        Returns:
            Snapshot of every outcome

        Raises:
            ValueError: If the dependency graph is invalid
            AggregateSyncError: If a resource failed and the run was not cancelled
        """
        dependencies = dict(dependencies or {})
        validate_dependencies(operations, dependencies)

        self.outcomes = {name: SyncOutcome(resource=name) for name in operations}
        tasks: dict[str, asyncio.Task[SyncOutcome]] = {}

        async def run_one(name: str) -> SyncOutcome:
            prerequisite = dependencies.get(name)
            if prerequisite is None:
                return await self._invoke(name, operations[name])

            upstream = await tasks[prerequisite]
            if upstream.status == SyncStatus.SUCCESS:
                return await self._invoke(name, operations[name], upstream.result)
            if upstream.status == SyncStatus.CANCELLED:
                return self._settle(SyncOutcome(resource=name, status=SyncStatus.CANCELLED))
            bind_resource(name).warning("Skipped, prerequisite {} did not succeed", prerequisite)
            return self._settle(SyncOutcome.from_skipped(name))

        for name in operations:
            tasks[name] = asyncio.create_task(run_one(name), name=f"sync:{name}")

        settled = await asyncio.gather(*tasks.values(), return_exceptions=True)
        for name, outcome in zip(tasks, settled, strict=True):
            if isinstance(outcome, BaseException):
                # Task cancelled from outside the orchestrator
                self._settle(SyncOutcome(resource=name, status=SyncStatus.CANCELLED, error=outcome))

        result = AggregateSyncResult(
            outcomes={name: self.outcomes[name] for name in operations},
            cancelled=self.cancelled,
        )
        logger.info(
            "Sync run settled: {} succeeded, {} failed{}",
            len(result.succeeded),
            len(result.failed),
            " (cancelled)" if result.cancelled else "",
        )

        if raise_on_failure and result.has_failures and not result.cancelled:
            raise AggregateSyncError(result)
        return result

    async def _invoke(self, name: str, operation: SyncOperation, *args: Any) -> SyncOutcome:
        log = bind_resource(name)
        try:
            value = await operation(*args)
        except SyncCancelledError as e:
            log.info("Cancelled")
            return self._settle(SyncOutcome(resource=name, status=SyncStatus.CANCELLED, error=e))
        except Exception as e:
            log.error("Failed to sync: {}", e)
            return self._settle(SyncOutcome(resource=name, status=SyncStatus.ERROR, error=e))
        log.debug("Synced")
        return self._settle(SyncOutcome(resource=name, status=SyncStatus.SUCCESS, result=value))

    def _settle(self, outcome: SyncOutcome) -> SyncOutcome:
        current = self.outcomes.get(outcome.resource)
        if current is not None and current.status != SyncStatus.PENDING:
            return current
        self.outcomes[outcome.resource] = outcome
        return outcome
