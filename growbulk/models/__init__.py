"""Data models for bulk operations."""

from .operation import OperationKind, InputShape, OperationDescriptor
from .history import FieldPatch, SnapshotPatch, UndoPatch, EntityUndo, HistoryEntry
from .progress import JobProgress, JobStatus, ItemStatus

__all__ = [
    "OperationKind",
    "InputShape",
    "OperationDescriptor",
    "FieldPatch",
    "SnapshotPatch",
    "UndoPatch",
    "EntityUndo",
    "HistoryEntry",
    "JobProgress",
    "JobStatus",
    "ItemStatus",
]
