"""Undo patches and operation history entries."""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from .operation import OperationKind
from ..utils.datetime_utils import utc_now


class FieldPatch(BaseModel):
    """Restore a single field to its previous value."""
    type: Literal["field"] = "field"
    field: str
    old_value: Any = None


class SnapshotPatch(BaseModel):
    """Re-create an entity that the forward operation removed."""
    type: Literal["snapshot"] = "snapshot"
    full_snapshot: Dict[str, Any]


UndoPatch = Union[FieldPatch, SnapshotPatch]


class EntityUndo(BaseModel):
    """Undo patch for one entity."""
    entity_id: str
    patch: UndoPatch = Field(..., discriminator="type")


class HistoryEntry(BaseModel):
    """A completed bulk job, as recorded in the undo log."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    operation_kind: OperationKind
    timestamp: datetime = Field(default_factory=utc_now)
    item_count: int
    success_count: int
    failure_count: int
    skipped_count: int = 0
    cancelled: bool = False
    input_snapshot: Dict[str, Any] = Field(default_factory=dict)
    undoable: bool = False
    undo_patches: Optional[List[EntityUndo]] = None

    @property
    def has_undo_data(self) -> bool:
        return self.undoable and bool(self.undo_patches)
