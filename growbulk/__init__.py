"""growbulk: bulk operation engine for plant records."""

__version__ = "1.0.0"
