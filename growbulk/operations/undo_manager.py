"""
Bounded undo log for bulk operations.

Provides:
- Newest-first history of completed jobs (default depth 10, FIFO eviction)
- Single-step undo of the most recent job
- Sequential patch application, so restores never race each other
- Retryable partial failures (the entry stays until every patch is applied)
"""

import logging
from typing import Any, Dict, List, Optional

from config import settings

from ..models.history import EntityUndo, FieldPatch, HistoryEntry, SnapshotPatch
from ..monitoring.prometheus import bulk_undo_total
from ..stores.base import EntityStore
from .exceptions import NoUndoableOperation, UndoError

logger = logging.getLogger(__name__)


class UndoLog:
    """History of completed bulk jobs with single-step undo."""

    def __init__(self, max_undo_depth: Optional[int] = None):
        self.max_undo_depth = settings.history_depth if max_undo_depth is None else max_undo_depth
        self._entries: List[HistoryEntry] = []

    def push(self, entry: HistoryEntry):
        """Record a completed job at the front; drop the oldest past max depth."""
        self._entries.insert(0, entry)
        if len(self._entries) > self.max_undo_depth:
            evicted = self._entries[self.max_undo_depth:]
            self._entries = self._entries[:self.max_undo_depth]
            logger.debug(f"Evicted {len(evicted)} old history entries")

    def peek(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    @property
    def can_undo(self) -> bool:
        entry = self.peek()
        return entry is not None and entry.has_undo_data

    def clear(self):
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    async def pop_and_apply(self, store: EntityStore) -> Dict[str, Any]:
        """
        Undo the most recent job.

        Args:
            store: Entity store to restore into

        Returns:
            Dict with the undone operation and restored entity ids

        Raises:
            NoUndoableOperation: If the front entry is missing, not undoable or has no patches
            UndoError: If some patches failed; the entry is kept with only those patches
        """
        entry = self.peek()
        if entry is None or not entry.has_undo_data:
            bulk_undo_total.labels(result="rejected").inc()
            raise NoUndoableOperation()

        restored: List[str] = []
        failed: List[EntityUndo] = []

        for undo in entry.undo_patches:
            try:
                await self._apply_patch(store, undo)
                restored.append(undo.entity_id)
            except Exception as e:
                logger.error(f"Undo failed for {undo.entity_id}: {e}")
                failed.append(undo)

        if failed:
            self._replace(entry.id, entry.model_copy(update={"undo_patches": failed}))
            bulk_undo_total.labels(result="partial").inc()
            raise UndoError(
                f"Undo of {entry.operation_kind.value} partially applied: "
                f"{len(restored)} restored, {len(failed)} not restored",
                restored=restored,
                not_restored=[u.entity_id for u in failed],
            )

        self._remove(entry.id)
        bulk_undo_total.labels(result="success").inc()
        logger.info(f"Undone {entry.operation_kind.value} ({len(restored)} entities restored)")

        return {
            "success": True,
            "history_id": entry.id,
            "operation": entry.operation_kind.value,
            "restored": restored,
        }

    async def _apply_patch(self, store: EntityStore, undo: EntityUndo):
        patch = undo.patch
        if isinstance(patch, FieldPatch):
            await store.update(undo.entity_id, {patch.field: patch.old_value})
        elif isinstance(patch, SnapshotPatch):
            await store.create(dict(patch.full_snapshot))
        else:
            raise ValueError(f"Unknown undo patch: {patch!r}")

    def _replace(self, entry_id: str, new_entry: HistoryEntry):
        self._entries = [new_entry if e.id == entry_id else e for e in self._entries]

    def _remove(self, entry_id: str):
        self._entries = [e for e in self._entries if e.id != entry_id]
