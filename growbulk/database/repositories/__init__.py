"""Repository classes for database operations."""

from .plants import PlantRepository, get_plant_repository, plant_to_snapshot

__all__ = [
    "PlantRepository",
    "get_plant_repository",
    "plant_to_snapshot",
]
