"""
Pytest configuration and shared fixtures.
"""

import pytest

from growbulk.operations.batch import BatchExecutor
from growbulk.operations.catalog import OperationCatalog
from growbulk.operations.undo_manager import UndoLog
from growbulk.stores.memory import InMemoryEntityStore


@pytest.fixture
def sample_plants():
    """Sample plant snapshots for testing."""
    return [
        {"id": "1", "name": "Test Plant 1", "strain": "Test Strain 1", "status": "healthy", "stage": "vegetative", "location": "Tent A"},
        {"id": "2", "name": "Test Plant 2", "strain": "Test Strain 2", "status": "flowering", "stage": "flowering", "location": "Tent A"},
        {"id": "3", "name": "Test Plant 3", "strain": "Test Strain 3", "status": "healthy", "stage": "seedling", "location": "Tent B"},
    ]


@pytest.fixture
def store(sample_plants):
    """In-memory store seeded with the sample plants."""
    return InMemoryEntityStore(sample_plants)


@pytest.fixture
def catalog():
    """Catalog built from the default operation table."""
    return OperationCatalog.from_config()


@pytest.fixture
def undo_log():
    return UndoLog(max_undo_depth=10)


@pytest.fixture
def executor(store, catalog, undo_log):
    """Executor without throttle or display grace, so tests run fast."""
    return BatchExecutor(store, catalog=catalog, undo_log=undo_log, throttle_ms=0, display_grace_ms=0)
