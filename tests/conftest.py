"""Pytest configuration and shared fixtures.

Usage Guide:
- For fetch engine tests: queue responses on a CannedResponses transport
- For sync client tests: route responses by URL path and use session_factory
- For upstream payloads: import builders from tests.fixtures
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from activity_sync.db.models import Base

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# -----------------------------------------------------------------------------
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)
JAN_12 = datetime(2024, 1, 12, 16, 0, 0, tzinfo=UTC)
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)
JAN_16 = datetime(2024, 1, 16, 14, 0, 0, tzinfo=UTC)
JAN_20 = datetime(2024, 1, 20, 16, 0, 0, tzinfo=UTC)

JAN_10_ISO = "2024-01-10T09:00:00Z"
JAN_12_ISO = "2024-01-12T16:00:00Z"
JAN_15_ISO = "2024-01-15T10:00:00Z"
JAN_16_ISO = "2024-01-16T14:00:00Z"
JAN_20_ISO = "2024-01-20T16:00:00Z"


# -----------------------------------------------------------------------------
# HTTP helpers
# -----------------------------------------------------------------------------
def json_response(
    data: Any,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """A JSON response as an upstream API would send it."""
    return httpx.Response(status_code, json=data, headers=headers)


def link_next(url: str) -> dict[str, str]:
    """Headers continuing to ``url`` via ``Link: rel="next"``."""
    return {"link": f'<{url}>; rel="next", <{url}>; rel="last"'}


CannedItem = httpx.Response | BaseException


class CannedResponses:
    """Injectable transport returning canned responses.

    Queue mode hands out responses in order and fails the test when it
    runs dry. Routes match on the exact URL path; the last response of a
    route repeats once the others are used up.

    Usage:
        transport = CannedResponses([json_response([]), json_response([1])])
        transport.route("/repos/o/r/pulls", json_response([]))
        await fetch_with_retry(request, transport=transport)
        assert len(transport.requests) == 1
    """

    def __init__(self, responses: Iterable[CannedItem] | None = None) -> None:
        self._queue: list[CannedItem] = list(responses or [])
        self._routes: dict[str, list[CannedItem]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, path: str, *responses: CannedItem) -> CannedResponses:
        self._routes[path] = list(responses)
        return self

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get(request.url.path)
        if queue is not None:
            item = queue.pop(0) if len(queue) > 1 else queue[0]
        elif self._queue:
            item = self._queue.pop(0)
        else:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def transport() -> CannedResponses:
    """An empty canned transport; add responses with ``route``."""
    return CannedResponses()


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created. StaticPool
    keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, as the sync clients use it."""
    return async_sessionmaker(test_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    """Create an async session with auto-rollback.

    Changes are rolled back after each test to ensure isolation.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
