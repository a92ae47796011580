"""Tests for store bootstrap and shutdown."""

from unittest.mock import AsyncMock, patch

import pytest

from questlog.core.config import Settings
from questlog.core.sqlite_storage import SQLiteStorage
from questlog.domain.create_models import TaskCreate
from questlog.main import create_store, open_store
from tests.unit.mocks import RecordingStorage


@pytest.mark.unit
class TestBootstrap:
    async def test_create_store_loads_before_returning(self, test_settings):
        """Verify the returned store has finished its initial load."""
        store = await create_store(test_settings, configure_logging=False)

        assert store.loading is False
        assert store.tasks == ()

    async def test_create_store_configures_logfire(self, test_settings):
        with patch("questlog.main.configure_logfire") as mock_configure:
            await create_store(test_settings)

        mock_configure.assert_called_once_with(test_settings)

    async def test_open_store_closes_storage(self, test_settings):
        """Verify the storage backend is released when the block exits."""
        storage = RecordingStorage()
        storage.close = AsyncMock()

        with patch("questlog.main.get_storage", return_value=storage):
            async with open_store(test_settings, configure_logging=False) as store:
                await store.create_task(TaskCreate(title="Buy groceries"))

        storage.close.assert_awaited_once()
        assert storage.written_keys == ["@tasks"]

    async def test_sqlite_backend_selected_from_settings(self, tmp_path):
        run_settings = Settings(storage_backend="sqlite", sqlite_db_path=str(tmp_path / "questlog.db"))

        store = await create_store(run_settings, configure_logging=False)
        try:
            assert isinstance(store._storage, SQLiteStorage)
        finally:
            await store.close()

    async def test_sqlite_store_persists_across_runs(self, tmp_path):
        """Verify data written in one run is loaded by the next."""
        run_settings = Settings(storage_backend="sqlite", sqlite_db_path=str(tmp_path / "questlog.db"))

        async with open_store(run_settings, configure_logging=False) as store:
            partner = await store.invite_partner("a@b.com", "Ana")
            task = await store.create_task_for_partner(partner.id, TaskCreate(title="Fix the sink"))

        async with open_store(run_settings, configure_logging=False) as store:
            assert store.get_partner(partner.id) == partner
            assert store.get_task(task.id) == task
