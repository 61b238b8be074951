"""Static configuration for growbulk."""

from .settings import Settings, settings, get_settings
from .operations import DEFAULT_OPERATIONS, STAGE_OPTIONS, STATUS_OPTIONS

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "DEFAULT_OPERATIONS",
    "STAGE_OPTIONS",
    "STATUS_OPTIONS",
]
