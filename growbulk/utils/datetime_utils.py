"""
Centralized datetime utilities.

Bulk operations stamp every write with the same clock so that progress,
history and store entries line up.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def iso_now() -> str:
    """Current UTC time as an ISO-8601 string (for store payloads)."""
    return utc_now().isoformat()


def format_duration(ms: float) -> str:
    """Format milliseconds as ``"42s"`` or ``"3m 5s"``."""
    seconds = int(ms // 1000)
    if seconds < 60:
        return f"{seconds}s"
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}m {remaining}s"
