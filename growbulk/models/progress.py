"""
Live progress of one bulk job.

Mutated only by the BatchExecutor. Observers read ``snapshot()``, which
returns a detached copy and never exposes the live lists.
"""

import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from .history import UndoPatch
from .operation import OperationKind
from ..utils.datetime_utils import utc_now


class JobStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ItemStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"
    SKIPPED = "skipped"


class JobProgress:
    """Per-item progress of a running (or just finished) job."""

    def __init__(
        self,
        operation_kind: OperationKind,
        total: int,
        total_batches: int,
        estimated_cost_ms: float,
        job_id: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ):
        self.job_id = job_id or uuid.uuid4().hex[:12]
        self.operation_kind = operation_kind
        self.total = total
        self.total_batches = total_batches
        self.current_batch = 0
        self.completed: List[Dict[str, Any]] = []
        self.failed: List[Dict[str, Any]] = []
        self.skipped: List[Dict[str, Any]] = []
        self.processing: Set[str] = set()
        self.status = JobStatus.RUNNING
        self.started_at = started_at or utc_now()
        # Computed once at start, never recomputed
        self.estimated_end_at = self.started_at + timedelta(milliseconds=total * estimated_cost_ms)
        self.finished_at: Optional[datetime] = None

    # ==================== MUTATION (executor only) ====================

    def start_batch(self, index: int, ids: List[str]):
        """Enter batch ``index`` (0-based) and mark its items in flight."""
        self.current_batch = index + 1
        self.processing.update(ids)

    def mark_completed(self, item_id: str, undo_patch: Optional[UndoPatch] = None):
        self.processing.discard(item_id)
        self.completed.append({"id": item_id, "undo_patch": undo_patch})

    def mark_failed(self, item_id: str, error: str):
        self.processing.discard(item_id)
        self.failed.append({"id": item_id, "error": error})

    def mark_skipped(self, item_id: str, reason: str):
        self.processing.discard(item_id)
        self.skipped.append({"id": item_id, "reason": reason})

    def finish(self, status: JobStatus):
        self.status = status
        self.finished_at = utc_now()

    # ==================== QUERIES ====================

    @property
    def done_count(self) -> int:
        return len(self.completed) + len(self.failed)

    @property
    def pending(self) -> int:
        return self.total - self.done_count - len(self.processing) - len(self.skipped)

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return round(self.done_count / self.total * 100)

    @property
    def is_terminal(self) -> bool:
        return self.status != JobStatus.RUNNING

    @property
    def has_errors(self) -> bool:
        return bool(self.failed)

    @property
    def elapsed_ms(self) -> float:
        end = self.finished_at or utc_now()
        return (end - self.started_at).total_seconds() * 1000

    def item_status(self, item_id: str) -> ItemStatus:
        if item_id in self.processing:
            return ItemStatus.PROCESSING
        if any(c["id"] == item_id for c in self.completed):
            return ItemStatus.COMPLETED
        if any(f["id"] == item_id for f in self.failed):
            return ItemStatus.ERROR
        if any(s["id"] == item_id for s in self.skipped):
            return ItemStatus.SKIPPED
        return ItemStatus.PENDING

    def snapshot(self) -> Dict[str, Any]:
        """Detached, JSON-serialisable copy for observers."""
        return {
            "job_id": self.job_id,
            "operation": self.operation_kind.value,
            "status": self.status.value,
            "total": self.total,
            "current_batch": self.current_batch,
            "total_batches": self.total_batches,
            "completed": [
                {
                    "id": c["id"],
                    "undo_patch": c["undo_patch"].model_dump(mode="json") if c["undo_patch"] else None,
                }
                for c in self.completed
            ],
            "failed": [dict(f) for f in self.failed],
            "skipped": [dict(s) for s in self.skipped],
            "processing": sorted(self.processing),
            "pending": self.pending,
            "percent": self.percent,
            "started_at": self.started_at.isoformat(),
            "estimated_end_at": self.estimated_end_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
