"""
Unit tests for InMemoryEntityStore.
"""

import pytest

from growbulk.database.exceptions import DatabaseConstraintError, EntityNotFoundError
from growbulk.stores.memory import InMemoryEntityStore


class TestInMemoryEntityStore:

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, store):
        plant = await store.get("1")
        plant["status"] = "mutated"

        assert (await store.get("1"))["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get("nope") is None

    @pytest.mark.asyncio
    async def test_update_merges(self, store):
        await store.update("1", {"status": "issues"})

        plant = await store.get("1")
        assert plant["status"] == "issues"
        assert plant["stage"] == "vegetative"

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        with pytest.raises(EntityNotFoundError):
            await store.update("nope", {"status": "issues"})

    @pytest.mark.asyncio
    async def test_create_generates_id(self):
        store = InMemoryEntityStore()

        entity_id = await store.create({"name": "New"})

        assert entity_id
        assert (await store.get(entity_id))["id"] == entity_id

    @pytest.mark.asyncio
    async def test_create_duplicate(self, store):
        with pytest.raises(DatabaseConstraintError):
            await store.create({"id": "1"})

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.delete("1")

        assert "1" not in store
        assert len(store) == 2
        with pytest.raises(EntityNotFoundError):
            await store.delete("1")

    @pytest.mark.asyncio
    async def test_append_log(self, store):
        await store.append_log("1", "notes", {"content": "a"})
        await store.append_log("1", "notes", {"content": "b"})

        assert [e["content"] for e in store.logs("1", "notes")] == ["a", "b"]
        assert store.logs("2", "notes") == []

    @pytest.mark.asyncio
    async def test_append_log_missing(self, store):
        with pytest.raises(EntityNotFoundError):
            await store.append_log("nope", "notes", {})
