"""
Plant repository: EntityStore over async SQLAlchemy.

Handles:
- Plant CRUD with snapshot <-> row mapping
- Sub-log appends (notes, metrics, stage_history, harvests, care)
"""

import logging
import uuid
from typing import Optional, List, Dict, Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..connection import get_database
from ..models import PlantDB, PlantLogDB
from ..exceptions import (
    DatabaseConstraintError,
    DatabaseOperationError,
    EntityNotFoundError,
)
from ...stores.base import EntityStore

logger = logging.getLogger(__name__)

# Snapshot keys stored as real columns; everything else goes to ``attributes``
COLUMN_FIELDS = ("name", "strain", "status", "stage", "location", "parent_id")


def _split(data: Dict[str, Any]):
    columns = {k: v for k, v in data.items() if k in COLUMN_FIELDS}
    extra = {k: v for k, v in data.items() if k not in COLUMN_FIELDS and k != "id"}
    return columns, extra


def plant_to_snapshot(plant: PlantDB) -> Dict[str, Any]:
    """Entity snapshot (plain dict) for a plant row."""
    snapshot: Dict[str, Any] = dict(plant.attributes or {})
    for field in COLUMN_FIELDS:
        snapshot[field] = getattr(plant, field)
    snapshot["id"] = plant.id
    return snapshot


class PlantRepository(EntityStore):
    """Repository for plant records."""

    def __init__(self):
        self.db = get_database()

    async def get(self, entity_id: str) -> Optional[Dict[str, Any]]:
        async with self.db.session() as session:
            plant = await session.get(PlantDB, entity_id)
            return plant_to_snapshot(plant) if plant else None

    async def update(self, entity_id: str, patch: Dict[str, Any]) -> None:
        async with self.db.session() as session:
            plant = await session.get(PlantDB, entity_id)
            if not plant:
                raise EntityNotFoundError(f"Plant {entity_id} not found")

            columns, extra = _split(patch)
            for field, value in columns.items():
                setattr(plant, field, value)
            if extra:
                # Reassign so the JSON column is flagged dirty
                plant.attributes = {**(plant.attributes or {}), **extra}

            try:
                await session.flush()
            except Exception as e:
                logger.error(f"Failed to update plant {entity_id}: {e}")
                raise DatabaseOperationError(f"Failed to update plant {entity_id}: {e}")

            logger.debug(f"Updated plant {entity_id}: {list(patch)}")

    async def create(self, entity: Dict[str, Any]) -> str:
        entity_id = entity.get("id") or uuid.uuid4().hex[:12]
        columns, extra = _split(entity)

        async with self.db.session() as session:
            try:
                plant = PlantDB(id=entity_id, attributes=extra or None, **columns)
                session.add(plant)
                await session.flush()

                logger.info(f"Created plant {entity_id} in database")
                return entity_id

            except IntegrityError as e:
                logger.error(f"Constraint violation creating plant: {e}")
                raise DatabaseConstraintError(
                    f"Cannot create plant {entity_id}: duplicate or constraint violation"
                )

            except Exception as e:
                logger.error(f"Plant creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create plant: {e}")

    async def delete(self, entity_id: str) -> None:
        async with self.db.session() as session:
            plant = await session.get(PlantDB, entity_id)
            if not plant:
                raise EntityNotFoundError(f"Plant {entity_id} not found")

            await session.delete(plant)
            logger.info(f"Deleted plant {entity_id}")

    async def append_log(self, entity_id: str, log_name: str, entry: Dict[str, Any]) -> None:
        async with self.db.session() as session:
            plant = await session.get(PlantDB, entity_id)
            if not plant:
                raise EntityNotFoundError(f"Plant {entity_id} not found")

            session.add(PlantLogDB(plant_id=entity_id, log_name=log_name, entry=entry))
            await session.flush()

    async def get_logs(self, entity_id: str, log_name: str) -> List[Dict[str, Any]]:
        """Entries of one sub-log, oldest first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(PlantLogDB)
                .where(PlantLogDB.plant_id == entity_id)
                .where(PlantLogDB.log_name == log_name)
                .order_by(PlantLogDB.id)
            )
            return [row.entry for row in result.scalars().all()]


# Singleton
_plant_repository: Optional[PlantRepository] = None


def get_plant_repository() -> PlantRepository:
    """Get the plant repository singleton."""
    global _plant_repository
    if _plant_repository is None:
        _plant_repository = PlantRepository()
    return _plant_repository
