"""
SQL persistence for plant records.

Handles:
- Plant storage with JSON attributes for free-form snapshot fields
- Append-only plant sub-logs
- An EntityStore implementation for the bulk engine
"""

from .connection import (
    get_database,
    Database,
    init_database,
    close_database,
)
from .models import Base, PlantDB, PlantLogDB
from .exceptions import (
    DatabaseError,
    DatabaseConnectionError,
    DatabaseConstraintError,
    DatabaseOperationError,
    EntityNotFoundError,
)

__all__ = [
    "get_database",
    "Database",
    "init_database",
    "close_database",
    "Base",
    "PlantDB",
    "PlantLogDB",
    "DatabaseError",
    "DatabaseConnectionError",
    "DatabaseConstraintError",
    "DatabaseOperationError",
    "EntityNotFoundError",
]
