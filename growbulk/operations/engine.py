"""
Bulk engine facade.

One object per caller that ties together the selection, the catalog, the
batch executor and the undo log, sharing a single job slot so that a bulk
job and an undo never overlap.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..models.history import HistoryEntry
from ..models.operation import OperationDescriptor, OperationKind
from ..stores.base import EntityStore
from .batch import BatchExecutor, ProgressCallback
from .catalog import OperationCatalog
from .exceptions import BulkOperationError
from .job_slot import CancellationToken, JobSlot
from .selection import SelectionSet
from .undo_manager import UndoLog

logger = logging.getLogger(__name__)


class BulkEngine:
    """Selection state, operation state, history and actions for one caller."""

    def __init__(
        self,
        store: EntityStore,
        catalog: Optional[OperationCatalog] = None,
        throttle_ms: Optional[int] = None,
        display_grace_ms: Optional[int] = None,
        history_depth: Optional[int] = None,
    ):
        self.store = store
        self.catalog = catalog if catalog is not None else OperationCatalog.from_config()
        self.selection = SelectionSet()
        self.undo_log = UndoLog(max_undo_depth=history_depth)
        self.job_slot = JobSlot()
        self.executor = BatchExecutor(
            store,
            catalog=self.catalog,
            undo_log=self.undo_log,
            job_slot=self.job_slot,
            throttle_ms=throttle_ms,
            display_grace_ms=display_grace_ms,
        )
        self.error: Optional[str] = None

    # ==================== STATE ====================

    @property
    def is_processing(self) -> bool:
        return self.job_slot.is_busy

    @property
    def current_operation(self) -> Optional[str]:
        return self.job_slot.label

    @property
    def progress(self) -> Optional[Dict[str, Any]]:
        active = self.executor.active_progress
        return active.snapshot() if active else None

    @property
    def history(self) -> List[HistoryEntry]:
        return self.undo_log.entries()

    @property
    def can_undo(self) -> bool:
        return self.undo_log.can_undo

    def describe(self, kind: Union[str, OperationKind]) -> OperationDescriptor:
        return self.catalog.get(kind)

    def selected_entities(self, entities: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        return self.selection.resolve(entities)

    def available_operations(self, entities: Iterable[Mapping[str, Any]]) -> List[OperationDescriptor]:
        """Operations valid for the selected subset of ``entities``."""
        return self.catalog.available_for(self.selection.resolve(entities))

    # ==================== ACTIONS ====================

    async def execute(
        self,
        kind: Union[str, OperationKind],
        input_data: Optional[Mapping[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> HistoryEntry:
        """Run ``kind`` over the current selection."""
        self.error = None
        try:
            return await self.executor.run(
                kind,
                input_data,
                self.selection.ids,
                cancel_token=cancel_token,
                on_progress=on_progress,
            )
        except BulkOperationError as e:
            self.error = f"Operation failed: {e}"
            raise

    async def undo_last(self) -> Dict[str, Any]:
        """
        Undo the most recent job.

        Shares the job slot with ``execute``: rejected while a job is running, but
        a finished job still in its display-grace period is dismissed first.
        """
        if self.job_slot.in_grace_period:
            self.executor.dismiss()
        self.job_slot.acquire("undo")
        self.error = None
        try:
            return await self.undo_log.pop_and_apply(self.store)
        except BulkOperationError as e:
            self.error = f"Undo failed: {e}"
            raise
        finally:
            self.job_slot.release()

    def cancel(self) -> bool:
        """Cancel the running job at its next batch boundary."""
        active = self.executor.active_progress
        if active is None or active.is_terminal:
            return False
        return self.executor.cancel(active.job_id)

    def dismiss(self):
        """Drop the just-completed job display and free the slot."""
        self.executor.dismiss()

    def clear_error(self):
        self.error = None
