"""
Wiring for the growbulk bulk operation engine.

Configures logging, builds a BulkEngine from settings and manages the
database and Redis connections around it.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from config import settings

from .cache.redis_client import close_redis
from .database.connection import close_database, init_database
from .database.repositories.plants import get_plant_repository
from .operations.catalog import OperationCatalog
from .operations.engine import BulkEngine
from .stores.base import EntityStore
from .stores.memory import InMemoryEntityStore

logger = logging.getLogger(__name__)


def setup_logging():
    """Configure root logging from settings."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
    )


def create_bulk_engine(
    store: Optional[EntityStore] = None,
    catalog: Optional[OperationCatalog] = None,
) -> BulkEngine:
    """
    Build a BulkEngine.

    Args:
        store: Entity store (defaults to the plant repository when
            ``BULK_DATABASE_URL`` is set, otherwise an empty in-memory store)
        catalog: Operation catalog (defaults to ``config.operations``)
    """
    if store is None:
        if settings.database_url:
            store = get_plant_repository()
        else:
            logger.warning("BULK_DATABASE_URL not configured - using in-memory store")
            store = InMemoryEntityStore()

    engine = BulkEngine(
        store,
        catalog=catalog,
        throttle_ms=settings.batch_throttle_ms,
        display_grace_ms=settings.display_grace_ms,
        history_depth=settings.history_depth,
    )
    logger.info(
        f"Bulk engine ready ({len(engine.catalog)} operations, {type(store).__name__}, "
        f"throttle {settings.batch_throttle_ms}ms, history depth {settings.history_depth})"
    )
    return engine


@asynccontextmanager
async def lifespan(store: Optional[EntityStore] = None) -> AsyncIterator[BulkEngine]:
    """Start the database (if configured), yield an engine, close connections on exit."""
    logger.info("Starting growbulk...")

    if settings.database_url:
        try:
            if await init_database():
                logger.info("PostgreSQL database initialized")
            else:
                logger.warning("PostgreSQL failed to initialize")
        except Exception as e:
            logger.warning(f"PostgreSQL init failed: {e}")

    try:
        yield create_bulk_engine(store=store)
    finally:
        try:
            await close_database()
        except Exception as e:
            logger.warning(f"Failed to close database during shutdown: {e}")
        await close_redis()
        logger.info("Shutdown complete")
