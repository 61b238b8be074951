"""
Bulk operations on plant records.

Selection management, the operation catalog, the batch executor with
bounded concurrency and throttling, progress tracking and a bounded undo log.
"""

from .batch import BatchExecutor, partition
from .catalog import OperationCatalog
from .effects import EFFECTS, EffectResult
from .engine import BulkEngine
from .exceptions import (
    BulkOperationError,
    ConfigurationError,
    ValidationError,
    ItemError,
    ConcurrencyError,
    UndoError,
    NoUndoableOperation,
)
from .job_slot import JobSlot, CancellationToken
from .selection import SelectionSet
from .undo_manager import UndoLog
from .validation import validate_input

__all__ = [
    "BatchExecutor",
    "partition",
    "OperationCatalog",
    "EFFECTS",
    "EffectResult",
    "BulkEngine",
    "BulkOperationError",
    "ConfigurationError",
    "ValidationError",
    "ItemError",
    "ConcurrencyError",
    "UndoError",
    "NoUndoableOperation",
    "JobSlot",
    "CancellationToken",
    "SelectionSet",
    "UndoLog",
    "validate_input",
]
