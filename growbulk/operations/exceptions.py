"""Exceptions raised by the bulk operation engine."""

from typing import List, Optional


class BulkOperationError(Exception):
    """Base exception for bulk operation errors."""
    pass


class ConfigurationError(BulkOperationError):
    """Unknown operation kind or malformed descriptor."""
    pass


class ValidationError(BulkOperationError):
    """Missing or invalid input for an operation."""
    pass


class ItemError(BulkOperationError):
    """A single item's store call failed. Recorded, never re-raised by the executor."""

    def __init__(self, item_id: str, message: str):
        super().__init__(message)
        self.item_id = item_id


class ConcurrencyError(BulkOperationError):
    """A job is already running."""
    pass


class UndoError(BulkOperationError):
    """Undo could not be (fully) applied."""

    def __init__(
        self,
        message: str,
        restored: Optional[List[str]] = None,
        not_restored: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.restored = restored or []
        self.not_restored = not_restored or []


class NoUndoableOperation(UndoError):
    """The most recent history entry cannot be undone."""

    def __init__(self, message: str = "No undoable operation found"):
        super().__init__(message)
