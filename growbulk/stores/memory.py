"""In-memory entity store, used for tests and local wiring."""

import copy
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from .base import EntityStore
from ..database.exceptions import DatabaseConstraintError, EntityNotFoundError

logger = logging.getLogger(__name__)


class InMemoryEntityStore(EntityStore):
    """Dict-backed store. Snapshots returned by ``get`` are deep copies."""

    def __init__(self, entities: Optional[Iterable[Dict[str, Any]]] = None):
        self._entities: Dict[str, Dict[str, Any]] = {}
        self._logs: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        for entity in entities or []:
            self._entities[entity["id"]] = copy.deepcopy(entity)

    async def get(self, entity_id: str) -> Optional[Dict[str, Any]]:
        entity = self._entities.get(entity_id)
        return copy.deepcopy(entity) if entity is not None else None

    async def update(self, entity_id: str, patch: Dict[str, Any]) -> None:
        if entity_id not in self._entities:
            raise EntityNotFoundError(f"Entity {entity_id} not found")
        self._entities[entity_id].update(copy.deepcopy(patch))

    async def create(self, entity: Dict[str, Any]) -> str:
        entity_id = entity.get("id") or uuid.uuid4().hex[:12]
        if entity_id in self._entities:
            raise DatabaseConstraintError(f"Entity {entity_id} already exists")
        data = copy.deepcopy(entity)
        data["id"] = entity_id
        self._entities[entity_id] = data
        logger.debug(f"Created entity {entity_id}")
        return entity_id

    async def delete(self, entity_id: str) -> None:
        if self._entities.pop(entity_id, None) is None:
            raise EntityNotFoundError(f"Entity {entity_id} not found")

    async def append_log(self, entity_id: str, log_name: str, entry: Dict[str, Any]) -> None:
        if entity_id not in self._entities:
            raise EntityNotFoundError(f"Entity {entity_id} not found")
        self._logs.setdefault(entity_id, {}).setdefault(log_name, []).append(copy.deepcopy(entry))

    # ==================== INSPECTION ====================

    def logs(self, entity_id: str, log_name: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._logs.get(entity_id, {}).get(log_name, []))

    def all(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(e) for e in self._entities.values()]

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)
