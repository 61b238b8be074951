"""
Unit tests for UndoLog.

Tests history bounds, single-step undo and partial undo failures.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from growbulk.models.history import EntityUndo, FieldPatch, HistoryEntry, SnapshotPatch
from growbulk.models.operation import OperationKind
from growbulk.operations.exceptions import NoUndoableOperation, UndoError
from growbulk.operations.undo_manager import UndoLog


def make_entry(kind=OperationKind.UPDATE_STATUS, undoable=True, patches=None, **kwargs):
    return HistoryEntry(
        operation_kind=kind,
        item_count=len(patches or []),
        success_count=len(patches or []),
        failure_count=0,
        undoable=undoable,
        undo_patches=patches,
        **kwargs,
    )


def status_patch(entity_id, old_value):
    return EntityUndo(entity_id=entity_id, patch=FieldPatch(field="status", old_value=old_value))


class TestUndoLog:
    """Test history bookkeeping."""

    def test_push_newest_first(self, undo_log):
        first = make_entry()
        second = make_entry()

        undo_log.push(first)
        undo_log.push(second)

        assert undo_log.peek() is second
        assert undo_log.entries() == [second, first]

    def test_bounded_to_depth(self, undo_log):
        entries = [make_entry() for _ in range(11)]
        for entry in entries:
            undo_log.push(entry)

        assert len(undo_log) == 10
        assert undo_log.peek() is entries[-1]
        # The very first push was evicted
        assert entries[0] not in undo_log.entries()

    def test_zero_depth_keeps_nothing(self):
        undo_log = UndoLog(max_undo_depth=0)
        undo_log.push(make_entry())

        assert undo_log.max_undo_depth == 0
        assert len(undo_log) == 0
        assert undo_log.can_undo is False

    def test_default_depth_from_settings(self):
        from config import settings
        assert UndoLog().max_undo_depth == settings.history_depth

    def test_can_undo(self, undo_log):
        assert undo_log.can_undo is False

        undo_log.push(make_entry(patches=[status_patch("1", "healthy")]))
        assert undo_log.can_undo is True

        undo_log.push(make_entry(kind=OperationKind.ADD_NOTES, undoable=False))
        assert undo_log.can_undo is False

    def test_clear(self, undo_log):
        undo_log.push(make_entry())
        undo_log.clear()
        assert len(undo_log) == 0
        assert undo_log.peek() is None


class TestPopAndApply:
    """Test applying undo patches."""

    @pytest.mark.asyncio
    async def test_empty_log(self, undo_log, store):
        with pytest.raises(NoUndoableOperation, match="No undoable operation found"):
            await undo_log.pop_and_apply(store)

    @pytest.mark.asyncio
    async def test_non_undoable_front_entry(self, undo_log, store):
        undo_log.push(make_entry(patches=[status_patch("1", "issues")]))
        undo_log.push(make_entry(kind=OperationKind.ADD_NOTES, undoable=False))

        with pytest.raises(NoUndoableOperation):
            await undo_log.pop_and_apply(store)

        # Older undoable entry is not reached past the blocking one
        assert len(undo_log) == 2
        assert (await store.get("1"))["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_undoable_entry_without_patches(self, undo_log, store):
        undo_log.push(make_entry(patches=[]))

        with pytest.raises(NoUndoableOperation):
            await undo_log.pop_and_apply(store)

    @pytest.mark.asyncio
    async def test_restores_field_values(self, undo_log, store):
        await store.update("1", {"status": "issues"})
        await store.update("3", {"status": "issues"})
        entry = make_entry(patches=[status_patch("1", "healthy"), status_patch("3", "healthy")])
        undo_log.push(entry)

        result = await undo_log.pop_and_apply(store)

        assert result == {
            "success": True,
            "history_id": entry.id,
            "operation": "update_status",
            "restored": ["1", "3"],
        }
        assert (await store.get("1"))["status"] == "healthy"
        assert (await store.get("3"))["status"] == "healthy"
        assert len(undo_log) == 0

    @pytest.mark.asyncio
    async def test_only_front_entry_removed(self, undo_log, store):
        older = make_entry(patches=[status_patch("2", "flowering")])
        undo_log.push(older)
        undo_log.push(make_entry(patches=[status_patch("1", "healthy")]))

        await undo_log.pop_and_apply(store)

        assert undo_log.entries() == [older]

    @pytest.mark.asyncio
    async def test_snapshot_patch_recreates_entity(self, undo_log, store):
        snapshot = {"id": "9", "name": "Gone", "status": "healthy", "stage": "vegetative"}
        undo_log.push(make_entry(
            kind=OperationKind.DELETE,
            patches=[EntityUndo(entity_id="9", patch=SnapshotPatch(full_snapshot=snapshot))],
        ))

        await undo_log.pop_and_apply(store)

        assert await store.get("9") == snapshot

    @pytest.mark.asyncio
    async def test_patches_applied_sequentially(self, undo_log):
        calls = []
        store = MagicMock()

        async def update(entity_id, patch):
            calls.append(("start", entity_id))
            await asyncio.sleep(0)
            calls.append(("end", entity_id))

        store.update = AsyncMock(side_effect=update)
        undo_log.push(make_entry(patches=[status_patch("1", "a"), status_patch("2", "b")]))

        await undo_log.pop_and_apply(store)

        assert calls == [("start", "1"), ("end", "1"), ("start", "2"), ("end", "2")]

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_failed_patches(self, undo_log, store):
        entry = make_entry(patches=[status_patch("1", "issues"), status_patch("ghost", "healthy")])
        undo_log.push(entry)

        with pytest.raises(UndoError) as exc_info:
            await undo_log.pop_and_apply(store)

        assert not isinstance(exc_info.value, NoUndoableOperation)
        assert exc_info.value.restored == ["1"]
        assert exc_info.value.not_restored == ["ghost"]
        assert (await store.get("1"))["status"] == "issues"

        # Entry stays, narrowed to what still needs restoring
        remaining = undo_log.peek()
        assert remaining.id == entry.id
        assert [u.entity_id for u in remaining.undo_patches] == ["ghost"]
        assert undo_log.can_undo

    @pytest.mark.asyncio
    async def test_retry_after_partial_failure(self, undo_log, store):
        undo_log.push(make_entry(patches=[status_patch("1", "issues"), status_patch("4", "healthy")]))

        with pytest.raises(UndoError):
            await undo_log.pop_and_apply(store)

        await store.create({"id": "4", "status": "issues"})
        result = await undo_log.pop_and_apply(store)

        assert result["restored"] == ["4"]
        assert (await store.get("4"))["status"] == "healthy"
        assert len(undo_log) == 0
