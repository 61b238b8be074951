"""Entity store port and implementations."""

from .base import EntityStore
from .memory import InMemoryEntityStore

__all__ = ["EntityStore", "InMemoryEntityStore"]
