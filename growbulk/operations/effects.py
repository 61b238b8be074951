"""
Per-item operation effects.

``EFFECTS`` maps each operation kind to an async function
``effect(store, entity, input_data) -> EffectResult``. Adding an operation
kind means adding a function here and a row to the catalog table.
"""

import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from config import settings

from ..models.history import FieldPatch, SnapshotPatch, UndoPatch
from ..models.operation import OperationKind
from ..stores.base import EntityStore
from ..utils.datetime_utils import iso_now
from .validation import DEFAULT_NAMING_PATTERN

logger = logging.getLogger(__name__)

BULK_SOURCE = "bulk-operation"


class EffectResult:
    """Outcome of one successful item effect."""

    def __init__(self, undo_patch: Optional[UndoPatch] = None, created_ids: Optional[List[str]] = None):
        self.undo_patch = undo_patch
        self.created_ids = created_ids or []


Effect = Callable[[EntityStore, Dict[str, Any], Dict[str, Any]], Awaitable[EffectResult]]


async def _set_field(store: EntityStore, entity: Dict[str, Any], field: str, value: Any) -> FieldPatch:
    """Write ``field`` plus its ``<field>_updated_at`` stamp; patch restores the old value."""
    old_value = entity.get(field)
    await store.update(entity["id"], {
        field: value,
        f"{field}_updated_at": iso_now(),
    })
    return FieldPatch(field=field, old_value=old_value)


async def update_stage(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    timestamp = iso_now()
    patch = await _set_field(store, entity, "stage", input_data["stage"])
    await store.append_log(entity["id"], "stage_history", {
        "stage": input_data["stage"],
        "start_date": timestamp,
        "end_date": None,
        "triggered_by": BULK_SOURCE,
        "notes": input_data.get("notes", ""),
    })
    return EffectResult(undo_patch=patch)


async def update_status(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    return EffectResult(undo_patch=await _set_field(store, entity, "status", input_data["status"]))


async def update_location(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    return EffectResult(undo_patch=await _set_field(store, entity, "location", input_data["location"]))


async def add_notes(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    await store.append_log(entity["id"], "notes", {
        "content": input_data["note"],
        "type": BULK_SOURCE,
        "timestamp": iso_now(),
        "author": input_data.get("author") or settings.note_author,
    })
    return EffectResult()


async def record_metrics(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    await store.append_log(entity["id"], "metrics", {
        **input_data["metrics"],
        "recorded_at": iso_now(),
        "stage": entity.get("stage") or "unknown",
        "source": BULK_SOURCE,
    })
    return EffectResult()


async def delete(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    snapshot = dict(entity)
    await store.delete(entity["id"])
    return EffectResult(undo_patch=SnapshotPatch(full_snapshot=snapshot))


def clone_name(pattern: str, parent: str, number: int) -> str:
    return pattern.replace("{parent}", parent).replace("{number}", str(number))


async def clone(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    pattern = input_data.get("naming_pattern") or DEFAULT_NAMING_PATTERN
    parent_name = entity.get("name") or entity["id"]
    timestamp = iso_now()

    created = []
    for number in range(1, input_data["clone_count"] + 1):
        clone_id = await store.create({
            "id": uuid.uuid4().hex[:12],
            "name": clone_name(pattern, parent_name, number),
            "strain": entity.get("strain"),
            "location": entity.get("location"),
            "stage": "seedling",
            "status": "healthy",
            "parent_id": entity["id"],
            "created_at": timestamp,
            "source": BULK_SOURCE,
        })
        created.append(clone_id)

    logger.debug(f"Created {len(created)} clones of {entity['id']}")
    return EffectResult(created_ids=created)


async def harvest(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
    timestamp = iso_now()
    await store.update(entity["id"], {
        "status": "harvested",
        "harvested_at": timestamp,
    })
    await store.append_log(entity["id"], "harvests", {
        "weight": input_data["weight"],
        "quality": input_data.get("quality"),
        "notes": input_data.get("notes", ""),
        "harvested_at": timestamp,
        "stage": entity.get("stage") or "unknown",
        "source": BULK_SOURCE,
    })
    return EffectResult()


def _care(care_type: str) -> Effect:
    async def effect(store: EntityStore, entity: Dict[str, Any], input_data: Dict[str, Any]) -> EffectResult:
        await store.append_log(entity["id"], "care", {
            **input_data,
            "type": care_type,
            "timestamp": iso_now(),
            "source": BULK_SOURCE,
        })
        return EffectResult()

    effect.__name__ = care_type
    return effect


EFFECTS: Mapping[OperationKind, Effect] = {
    OperationKind.UPDATE_STAGE: update_stage,
    OperationKind.UPDATE_STATUS: update_status,
    OperationKind.UPDATE_LOCATION: update_location,
    OperationKind.ADD_NOTES: add_notes,
    OperationKind.RECORD_METRICS: record_metrics,
    OperationKind.DELETE: delete,
    OperationKind.CLONE: clone,
    OperationKind.HARVEST: harvest,
    OperationKind.FEED: _care("feed"),
    OperationKind.WATER: _care("water"),
}
