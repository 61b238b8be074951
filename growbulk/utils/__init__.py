"""Utility modules for growbulk."""

from .datetime_utils import utc_now, iso_now, format_duration

__all__ = [
    "utc_now",
    "iso_now",
    "format_duration",
]
