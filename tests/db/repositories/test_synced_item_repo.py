"""Tests for SyncedItemRepository."""

from activity_sync.db.repositories import SyncedItemRepository

SCOPE = "octocat/hello-world"


class TestSyncedItemUpsert:
    """Upsert tests for SyncedItemRepository."""

    async def test_insert(self, db_session):
        repository = SyncedItemRepository(db_session)

        item, created = await repository.upsert("pull", SCOPE, "1", {"number": 1, "title": "Fix"})

        assert created is True
        assert item.id is not None
        assert item.payload == {"number": 1, "title": "Fix"}

    async def test_update_replaces_payload(self, db_session):
        """Re-syncing the same key updates in place."""
        repository = SyncedItemRepository(db_session)
        first, _ = await repository.upsert("pull", SCOPE, "1", {"number": 1, "title": "Fix"})

        second, created = await repository.upsert("pull", SCOPE, "1", {"number": 1, "title": "Fix bug"})

        assert created is False
        assert second.id == first.id
        assert second.payload["title"] == "Fix bug"
        assert await repository.count() == 1

    async def test_key_is_scoped(self, db_session):
        repository = SyncedItemRepository(db_session)
        await repository.upsert("pull", SCOPE, "1", {"number": 1})
        await repository.upsert("pull", "octocat/other", "1", {"number": 1})
        await repository.upsert("release", SCOPE, "1", {"id": 1})

        assert await repository.count() == 3

    async def test_list_payload(self, db_session):
        """Statistics rows are stored as JSON arrays."""
        repository = SyncedItemRepository(db_session)

        item, _ = await repository.upsert("stats-punch-card", SCOPE, "0-13", [0, 13, 4])

        assert item.payload == [0, 13, 4]


class TestSyncedItemQuery:
    """get/list_items tests for SyncedItemRepository."""

    async def test_get(self, db_session):
        repository = SyncedItemRepository(db_session)
        await repository.upsert("commit", SCOPE, "abc123", {"sha": "abc123"})

        item = await repository.get("commit", SCOPE, "abc123")

        assert item is not None
        assert item.payload["sha"] == "abc123"
        assert await repository.get("commit", SCOPE, "missing") is None

    async def test_list_items_filters(self, db_session):
        repository = SyncedItemRepository(db_session)
        await repository.upsert("pull-commit", SCOPE, "1:a", {"sha": "a"}, parent_key="1")
        await repository.upsert("pull-commit", SCOPE, "1:b", {"sha": "b"}, parent_key="1")
        await repository.upsert("pull-commit", SCOPE, "2:c", {"sha": "c"}, parent_key="2")
        await repository.upsert("pull-commit", "octocat/other", "1:d", {"sha": "d"}, parent_key="1")

        assert len(await repository.list_items("pull-commit")) == 4
        assert [i.key for i in await repository.list_items("pull-commit", SCOPE)] == ["1:a", "1:b", "2:c"]
        assert [i.key for i in await repository.list_items("pull-commit", SCOPE, parent_key="1")] == [
            "1:a",
            "1:b",
        ]
        assert len(await repository.list_items("pull-commit", SCOPE, limit=1)) == 1


class TestSyncedItemDeleteChildren:
    """delete_children tests for SyncedItemRepository."""

    async def test_deletes_only_that_parents_children(self, db_session):
        repository = SyncedItemRepository(db_session)
        await repository.upsert("pull-commit", SCOPE, "1:a", {"sha": "a"}, parent_key="1")
        await repository.upsert("pull-commit", SCOPE, "1:b", {"sha": "b"}, parent_key="1")
        await repository.upsert("pull-commit", SCOPE, "2:c", {"sha": "c"}, parent_key="2")

        deleted = await repository.delete_children("pull-commit", SCOPE, "1")

        assert deleted == 2
        assert [i.key for i in await repository.list_items("pull-commit", SCOPE)] == ["2:c"]

    async def test_no_children(self, db_session):
        repository = SyncedItemRepository(db_session)
        assert await repository.delete_children("pull-commit", SCOPE, "42") == 0
