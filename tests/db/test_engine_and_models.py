"""Tests for the database engine, sessions and models."""

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from activity_sync.db import engine as db_engine
from activity_sync.db.models import SyncedItem, SyncRecord
from tests.conftest import JAN_15


@pytest.fixture
async def file_database(tmp_path):
    """Point the process-wide engine at a temporary SQLite file."""
    await db_engine.dispose_engine()
    db_engine.get_engine(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}")
    yield
    await db_engine.dispose_engine()


class TestDatabaseEngine:
    """Tests for async SQLAlchemy engine operations."""

    async def test_create_tables(self, test_engine):
        """Test that all tables are created successfully."""
        async with test_engine.connect() as conn:
            result = await conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
            tables = {row[0] for row in result.fetchall()}

        assert {"sync_records", "synced_items"} <= tables

    async def test_get_session_commits_on_success(self, file_database):
        await db_engine.create_tables()

        async with db_engine.get_session() as session:
            session.add(SyncRecord(resource="pull", scope="octocat/hello-world", created_at=JAN_15))

        async with db_engine.get_session() as session:
            records = (await session.execute(select(SyncRecord))).scalars().all()
        assert len(records) == 1

    async def test_get_session_rolls_back_on_error(self, file_database):
        await db_engine.create_tables()

        with pytest.raises(RuntimeError):
            async with db_engine.get_session() as session:
                session.add(SyncRecord(resource="pull", scope="octocat/hello-world", created_at=JAN_15))
                await session.flush()
                raise RuntimeError("boom")

        async with db_engine.get_session() as session:
            records = (await session.execute(select(SyncRecord))).scalars().all()
        assert records == []

    async def test_dispose_forgets_factory(self, file_database):
        factory = db_engine.get_session_factory()
        await db_engine.dispose_engine()
        assert db_engine.get_session_factory() is not factory


class TestModels:
    """Tests for model constraints."""

    async def test_synced_item_key_unique_per_scope(self, db_session):
        db_session.add(SyncedItem(resource="pull", scope="octocat/hello-world", key="1", payload={}))
        db_session.add(SyncedItem(resource="pull", scope="octocat/hello-world", key="1", payload={}))

        with pytest.raises(IntegrityError):
            await db_session.flush()

    def test_sync_record_repr(self):
        record = SyncRecord(id=3, resource="pull", scope="octocat/hello-world", created_at=JAN_15)
        assert repr(record) == "<SyncRecord(id=3, resource='pull', scope='octocat/hello-world', finished=False)>"
