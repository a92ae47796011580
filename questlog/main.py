"""questlog - local task and quest tracker core."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from questlog.core.config import Settings, settings
from questlog.core.logging import configure_logfire
from questlog.core.storage import get_storage
from questlog.services.task_store import TaskStore


logger = logging.getLogger(__name__)


async def create_store(app_settings: Settings | None = None, *, configure_logging: bool = True) -> TaskStore:
    """Build the storage backend and a loaded task store.

    Args:
        app_settings: Settings to use instead of the environment-derived ones
        configure_logging: Configure Logfire before building the store

    Returns:
        A store whose initial load has completed
    """
    active = app_settings or settings
    if configure_logging:
        configure_logfire(active)

    storage = get_storage(active)
    store = TaskStore(storage, active)
    await store.load()

    logger.info("startup", extra={"backend": active.storage_backend, "skin": active.skin})
    return store


@asynccontextmanager
async def open_store(
    app_settings: Settings | None = None, *, configure_logging: bool = True
) -> AsyncIterator[TaskStore]:
    """Own the store for the lifetime of the application run.

    Usage:
        async with open_store() as store:
            await store.create_task(TaskCreate(title="Buy groceries"))
    """
    store = await create_store(app_settings, configure_logging=configure_logging)
    try:
        yield store
    finally:
        await store.close()
        logger.info("shutdown")
