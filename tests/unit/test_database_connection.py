"""
Unit tests for database connection helpers.
"""

import pytest

from growbulk.database.connection import Database, _async_url


@pytest.mark.parametrize("url,expected", [
    ("postgres://u:p@host/db", "postgresql+asyncpg://u:p@host/db"),
    ("postgresql://u:p@host/db", "postgresql+asyncpg://u:p@host/db"),
    ("sqlite+aiosqlite:///bulk.db", "sqlite+aiosqlite:///bulk.db"),
])
def test_async_url(url, expected):
    assert _async_url(url) == expected


@pytest.mark.asyncio
async def test_initialize_without_url(monkeypatch):
    from config import settings
    monkeypatch.setattr(settings, "database_url", "")

    db = Database()

    assert await db.initialize() is False
    with pytest.raises(RuntimeError, match="not initialized"):
        async with db.session():
            pass
