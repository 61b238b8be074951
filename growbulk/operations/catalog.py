"""
Operation catalog: read-only lookup of operation descriptors.

Built once at startup from the static table in ``config.operations``.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models.operation import OperationDescriptor, OperationKind
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

HARVESTED_STATUS = "harvested"

# Kinds that make no sense once every selected plant is harvested
_EXCLUDED_WHEN_HARVESTED = (OperationKind.HARVEST, OperationKind.CLONE)


def _coerce_kind(kind: Union[str, OperationKind]) -> OperationKind:
    try:
        return OperationKind(kind)
    except ValueError:
        raise ConfigurationError(f"Unknown operation: {kind}")


class OperationCatalog:
    """Immutable table mapping operation kind to descriptor."""

    def __init__(self, descriptors: Iterable[OperationDescriptor]):
        table: Dict[OperationKind, OperationDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.kind in table:
                raise ConfigurationError(f"Duplicate operation kind: {descriptor.kind.value}")
            table[descriptor.kind] = descriptor
        self._table = table

    @classmethod
    def from_config(cls, rows: Optional[Iterable[Mapping[str, Any]]] = None) -> "OperationCatalog":
        """
        Build a catalog from configuration rows.

        Args:
            rows: Descriptor dicts (defaults to ``config.operations.DEFAULT_OPERATIONS``)

        Raises:
            ConfigurationError: If any row is malformed
        """
        if rows is None:
            from config.operations import DEFAULT_OPERATIONS
            rows = DEFAULT_OPERATIONS

        descriptors = []
        for row in rows:
            try:
                descriptors.append(OperationDescriptor(**row))
            except PydanticValidationError as e:
                raise ConfigurationError(
                    f"Malformed descriptor for {row.get('kind', '?')}: {e}"
                ) from e

        catalog = cls(descriptors)
        logger.debug(f"Loaded operation catalog with {len(catalog)} operations")
        return catalog

    def get(self, kind: Union[str, OperationKind]) -> OperationDescriptor:
        """Descriptor for ``kind``; ConfigurationError if not in the catalog."""
        op = _coerce_kind(kind)
        descriptor = self._table.get(op)
        if descriptor is None:
            raise ConfigurationError(f"Operation not in catalog: {op.value}")
        return descriptor

    def kinds(self) -> List[OperationKind]:
        return list(self._table)

    def available_for(self, selected_entities: Iterable[Mapping[str, Any]]) -> List[OperationDescriptor]:
        """
        Operations valid for the current selection, in catalog order.

        Harvest and clone are dropped when every selected plant is already harvested.
        """
        entities = list(selected_entities or [])
        if not entities:
            return []

        all_harvested = all(e.get("status") == HARVESTED_STATUS for e in entities)

        return [
            d for d in self._table.values()
            if not (all_harvested and d.kind in _EXCLUDED_WHEN_HARVESTED)
        ]

    def estimate_seconds(self, kind: Union[str, OperationKind], count: int) -> float:
        """Estimated duration for ``count`` items, in seconds."""
        return count * self.get(kind).estimated_cost_ms / 1000

    @staticmethod
    def format_estimate(seconds: float) -> str:
        if seconds < 60:
            return f"{round(seconds)} seconds"
        return f"{round(seconds / 60)} minutes"

    def __contains__(self, kind: object) -> bool:
        try:
            return OperationKind(kind) in self._table
        except ValueError:
            return False

    def __iter__(self) -> Iterator[OperationDescriptor]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)
