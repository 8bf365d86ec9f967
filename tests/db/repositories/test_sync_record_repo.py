"""Tests for SyncRecordRepository."""

from datetime import UTC, timedelta

from activity_sync.db.repositories import SyncRecordRepository
from tests.conftest import JAN_10, JAN_12, JAN_15, JAN_20


class TestSyncRecordLifecycle:
    """start/finish tests for SyncRecordRepository."""

    async def test_start_creates_unfinished_record(self, db_session):
        """A started run has no finish time."""
        repository = SyncRecordRepository(db_session)

        record = await repository.start("pull", "octocat/hello-world", now=JAN_15)

        assert record.id is not None
        assert record.created_at == JAN_15
        assert record.updated_at is None
        assert not record.is_finished

    async def test_finish_sets_updated_at(self, db_session):
        repository = SyncRecordRepository(db_session)
        record = await repository.start("pull", "octocat/hello-world", now=JAN_15)

        await repository.finish(record, now=JAN_15 + timedelta(minutes=3))

        assert record.is_finished
        assert record.updated_at == JAN_15 + timedelta(minutes=3)


class TestSyncRecordLatest:
    """latest() tests for SyncRecordRepository."""

    async def test_ignores_unfinished_runs(self, db_session):
        """A cancelled or failed run never becomes the latest."""
        repository = SyncRecordRepository(db_session)
        finished = await repository.start("pull", "octocat/hello-world", now=JAN_10)
        await repository.finish(finished)
        await repository.start("pull", "octocat/hello-world", now=JAN_15)

        latest = await repository.latest("pull", "octocat/hello-world")

        assert latest is not None
        assert latest.id == finished.id

    async def test_most_recently_started(self, db_session):
        repository = SyncRecordRepository(db_session)
        for started in (JAN_12, JAN_15, JAN_10):
            record = await repository.start("commit", "octocat/hello-world", now=started)
            await repository.finish(record)

        latest = await repository.latest("commit", "octocat/hello-world")

        assert latest is not None
        assert latest.created_at.replace(tzinfo=UTC) == JAN_15

    async def test_separates_resources_and_scopes(self, db_session):
        repository = SyncRecordRepository(db_session)
        record = await repository.start("pull", "octocat/hello-world", now=JAN_10)
        await repository.finish(record)

        assert await repository.latest("commit", "octocat/hello-world") is None
        assert await repository.latest("pull", "octocat/other") is None

    async def test_none_without_runs(self, db_session):
        repository = SyncRecordRepository(db_session)
        assert await repository.latest("pull", "octocat/hello-world") is None


class TestSyncRecordNewerThan:
    """Incremental window tests for SyncRecordRepository."""

    async def test_full_sync_without_marker_or_cutoff(self, db_session):
        repository = SyncRecordRepository(db_session)
        assert await repository.newer_than("pull", "octocat/hello-world") is None

    async def test_cutoff_without_marker(self, db_session):
        repository = SyncRecordRepository(db_session)
        assert await repository.newer_than("pull", "octocat/hello-world", JAN_10) == JAN_10

    async def test_marker_without_cutoff(self, db_session):
        repository = SyncRecordRepository(db_session)
        record = await repository.start("pull", "octocat/hello-world", now=JAN_15)
        await repository.finish(record)

        assert await repository.newer_than("pull", "octocat/hello-world") == JAN_15

    async def test_later_of_marker_and_cutoff(self, db_session):
        repository = SyncRecordRepository(db_session)
        record = await repository.start("pull", "octocat/hello-world", now=JAN_15)
        await repository.finish(record)

        assert await repository.newer_than("pull", "octocat/hello-world", JAN_10) == JAN_15
        assert await repository.newer_than("pull", "octocat/hello-world", JAN_20) == JAN_20

    async def test_unfinished_marker_does_not_move_window(self, db_session):
        repository = SyncRecordRepository(db_session)
        await repository.start("pull", "octocat/hello-world", now=JAN_15)

        assert await repository.newer_than("pull", "octocat/hello-world", JAN_10) == JAN_10

    async def test_returns_aware_datetimes(self, db_session):
        """SQLite returns naive datetimes; the window is always UTC-aware."""
        repository = SyncRecordRepository(db_session)
        record = await repository.start("pull", "octocat/hello-world", now=JAN_15)
        await repository.finish(record)
        db_session.expire_all()

        window = await repository.newer_than("pull", "octocat/hello-world")

        assert window is not None
        assert window.tzinfo is not None
