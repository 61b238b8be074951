"""
Entity store port.

The bulk engine only talks to records through this interface. Every call is
per-item; no multi-item atomicity is assumed.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class EntityStore(ABC):
    """Abstract per-record store used by the bulk engine."""

    @abstractmethod
    async def get(self, entity_id: str) -> Optional[Dict[str, Any]]:
        """Return a snapshot of the entity, or None if it does not exist."""

    @abstractmethod
    async def update(self, entity_id: str, patch: Dict[str, Any]) -> None:
        """Apply a partial update. Raises EntityNotFoundError if missing."""

    @abstractmethod
    async def create(self, entity: Dict[str, Any]) -> str:
        """Create an entity (keeping ``entity['id']`` if given) and return its id."""

    @abstractmethod
    async def delete(self, entity_id: str) -> None:
        """Delete an entity. Raises EntityNotFoundError if missing."""

    @abstractmethod
    async def append_log(self, entity_id: str, log_name: str, entry: Dict[str, Any]) -> None:
        """Append an entry to one of the entity's sub-logs (notes, metrics, ...)."""
