"""Custom exceptions for entity store operations."""


class DatabaseError(Exception):
    """Base exception for store errors."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Database connection failed."""
    pass


class DatabaseConstraintError(DatabaseError):
    """Constraint violation (duplicate id, foreign key, etc)."""
    pass


class DatabaseOperationError(DatabaseError):
    """General store operation failed."""
    pass


class EntityNotFoundError(DatabaseError):
    """Requested entity not found."""
    pass
