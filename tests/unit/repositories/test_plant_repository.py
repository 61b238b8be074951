"""
Unit tests for PlantRepository.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from sqlalchemy.exc import IntegrityError

from growbulk.database.exceptions import (
    DatabaseConstraintError,
    DatabaseOperationError,
    EntityNotFoundError,
)
from growbulk.database.models import PlantDB, PlantLogDB
from growbulk.database.repositories.plants import PlantRepository, plant_to_snapshot


@pytest.fixture
def mock_database():
    """Mock database with session context manager."""
    db = Mock()
    session = AsyncMock()

    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)

    session.get = AsyncMock(return_value=None)
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.add = Mock()
    session.delete = AsyncMock()

    db.session = Mock(return_value=session)

    return db, session


@pytest.fixture
def plant_repository(mock_database):
    """Create PlantRepository with mocked database."""
    db, session = mock_database
    repo = PlantRepository()
    repo.db = db
    return repo, session


@pytest.fixture
def sample_plant():
    return PlantDB(
        id="P-001",
        name="Northern Lights #1",
        strain="Northern Lights",
        status="healthy",
        stage="vegetative",
        location="Tent A",
        attributes={"stage_updated_at": "2026-01-01T00:00:00+00:00"},
    )


def test_plant_to_snapshot(sample_plant):
    snapshot = plant_to_snapshot(sample_plant)

    assert snapshot["id"] == "P-001"
    assert snapshot["stage"] == "vegetative"
    assert snapshot["parent_id"] is None
    assert snapshot["stage_updated_at"] == "2026-01-01T00:00:00+00:00"


# ============================================================
# READ TESTS
# ============================================================

@pytest.mark.asyncio
async def test_get_found(plant_repository, sample_plant):
    repo, session = plant_repository
    session.get.return_value = sample_plant

    result = await repo.get("P-001")

    session.get.assert_awaited_once_with(PlantDB, "P-001")
    assert result["name"] == "Northern Lights #1"


@pytest.mark.asyncio
async def test_get_not_found(plant_repository):
    repo, session = plant_repository

    assert await repo.get("P-999") is None


@pytest.mark.asyncio
async def test_get_logs(plant_repository):
    repo, session = plant_repository
    rows = [PlantLogDB(plant_id="P-001", log_name="notes", entry={"content": "a"})]
    mock_scalars = Mock()
    mock_scalars.all = Mock(return_value=rows)
    mock_result = Mock()
    mock_result.scalars = Mock(return_value=mock_scalars)
    session.execute.return_value = mock_result

    result = await repo.get_logs("P-001", "notes")

    assert result == [{"content": "a"}]


# ============================================================
# UPDATE TESTS
# ============================================================

@pytest.mark.asyncio
async def test_update_columns_and_attributes(plant_repository, sample_plant):
    repo, session = plant_repository
    session.get.return_value = sample_plant

    await repo.update("P-001", {"stage": "flowering", "stage_updated_at": "2026-02-01T00:00:00+00:00"})

    assert sample_plant.stage == "flowering"
    assert sample_plant.attributes == {"stage_updated_at": "2026-02-01T00:00:00+00:00"}
    session.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_not_found(plant_repository):
    repo, session = plant_repository

    with pytest.raises(EntityNotFoundError):
        await repo.update("P-999", {"status": "issues"})


@pytest.mark.asyncio
async def test_update_flush_error(plant_repository, sample_plant):
    repo, session = plant_repository
    session.get.return_value = sample_plant
    session.flush.side_effect = Exception("connection reset")

    with pytest.raises(DatabaseOperationError):
        await repo.update("P-001", {"status": "issues"})


# ============================================================
# CREATE / DELETE TESTS
# ============================================================

@pytest.mark.asyncio
async def test_create_splits_columns(plant_repository):
    repo, session = plant_repository

    entity_id = await repo.create({"id": "P-002", "name": "Clone", "stage": "seedling", "source": "bulk-operation"})

    assert entity_id == "P-002"
    added = session.add.call_args[0][0]
    assert added.name == "Clone"
    assert added.stage == "seedling"
    assert added.attributes == {"source": "bulk-operation"}


@pytest.mark.asyncio
async def test_create_duplicate(plant_repository):
    repo, session = plant_repository
    session.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(DatabaseConstraintError):
        await repo.create({"id": "P-001"})


@pytest.mark.asyncio
async def test_create_other_error(plant_repository):
    repo, session = plant_repository
    session.flush.side_effect = Exception("timeout")

    with pytest.raises(DatabaseOperationError):
        await repo.create({"id": "P-003"})


@pytest.mark.asyncio
async def test_delete(plant_repository, sample_plant):
    repo, session = plant_repository
    session.get.return_value = sample_plant

    await repo.delete("P-001")

    session.delete.assert_awaited_once_with(sample_plant)


@pytest.mark.asyncio
async def test_delete_not_found(plant_repository):
    repo, session = plant_repository

    with pytest.raises(EntityNotFoundError):
        await repo.delete("P-999")


@pytest.mark.asyncio
async def test_append_log(plant_repository, sample_plant):
    repo, session = plant_repository
    session.get.return_value = sample_plant

    await repo.append_log("P-001", "metrics", {"height": 12.0})

    added = session.add.call_args[0][0]
    assert isinstance(added, PlantLogDB)
    assert added.log_name == "metrics"
    assert added.entry == {"height": 12.0}


def test_get_plant_repository_singleton():
    from growbulk.database.repositories.plants import get_plant_repository

    assert get_plant_repository() is get_plant_repository()
