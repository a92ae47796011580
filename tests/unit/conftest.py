"""Pytest configuration and fixtures for unit tests."""

import pytest

from questlog.core.config import Settings
from questlog.domain.create_models import TaskCreate
from questlog.services.task_store import TaskStore
from tests.unit.mocks import RecordingStorage


TASKS_KEY = "@tasks"
PARTNERS_KEY = "@partners"
TASK_LISTS_KEY = "@task_lists"


@pytest.fixture
def test_settings() -> Settings:
    """Settings pinned to the defaults regardless of the environment."""
    return Settings(
        storage_backend="memory",
        skin="task",
        current_user_id="current-user",
        tasks_storage_key=TASKS_KEY,
        partners_storage_key=PARTNERS_KEY,
        task_lists_storage_key=TASK_LISTS_KEY,
    )


@pytest.fixture
def quest_settings(test_settings: Settings) -> Settings:
    """Settings using the quest skin."""
    return test_settings.model_copy(update={"skin": "quest"})


@pytest.fixture
def storage() -> RecordingStorage:
    """Provides a fresh recording in-memory storage for each test."""
    return RecordingStorage()


@pytest.fixture
async def store(storage: RecordingStorage, test_settings: Settings) -> TaskStore:
    """Provides a loaded, empty task store backed by the recording storage."""
    task_store = TaskStore(storage, test_settings)
    await task_store.load()
    return task_store


@pytest.fixture
def sample_task_data() -> TaskCreate:
    """Returns a minimal task payload."""
    return TaskCreate(title="Buy groceries", description="Milk and eggs", tags=["home"])
