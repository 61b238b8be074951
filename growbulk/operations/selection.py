"""Selection of records for bulk operations."""

from typing import Any, Callable, Dict, Iterable, List, Tuple


class SelectionSet:
    """
    Tracks which entity ids are chosen and whether selection mode is on.

    Ids keep insertion order so batches are sliced deterministically.
    """

    def __init__(self):
        self._ids: Dict[str, None] = {}
        self.selection_mode = False

    def toggle(self, entity_id: str):
        """Flip membership of one id."""
        if entity_id in self._ids:
            del self._ids[entity_id]
        else:
            self._ids[entity_id] = None

    def select_all(self, ids: Iterable[str]):
        """Replace the selection with exactly ``ids``."""
        self._ids = dict.fromkeys(ids)

    def select_where(self, items: Iterable[Dict[str, Any]], predicate: Callable[[Dict[str, Any]], bool]):
        """Replace the selection with the ids of items matching ``predicate``."""
        self._ids = dict.fromkeys(item["id"] for item in items if predicate(item))

    def clear(self):
        self._ids = {}

    def set_selection_mode(self, active: bool):
        """Leaving selection mode clears the selection."""
        if not active:
            self.clear()
        self.selection_mode = active

    def toggle_selection_mode(self):
        self.set_selection_mode(not self.selection_mode)

    @property
    def count(self) -> int:
        return len(self._ids)

    @property
    def is_empty(self) -> bool:
        return not self._ids

    @property
    def has_selection(self) -> bool:
        return bool(self._ids)

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(self._ids)

    def resolve(self, entities: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Subset of ``entities`` whose id is selected."""
        return [e for e in entities if e.get("id") in self._ids]

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._ids

    def __iter__(self):
        return iter(tuple(self._ids))

    def __len__(self) -> int:
        return len(self._ids)
