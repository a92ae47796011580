#!/usr/bin/env python3
"""Print the persisted collections and their statistics.

Usage:
    uv run python scripts/inspect_store.py
    STORAGE_BACKEND=redis REDIS_URL=redis://localhost:6379 uv run python scripts/inspect_store.py
"""

import asyncio
import logging

from questlog.core.config import settings
from questlog.domain.partner import status_vocabulary
from questlog.main import open_store
from questlog.services import task_queries


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def main() -> None:
    async with open_store(configure_logging=False) as store:
        stats = task_queries.task_statistics(store.tasks)
        logger.info(
            f"Tasks: {stats.total} total, {stats.pending} pending, {stats.completed} completed, "
            f"{stats.completed_xp}/{stats.total_xp} XP"
        )
        for task in store.tasks:
            assignee = task_queries.partner_display_name(store.partners, task.assigned_to) if task.assigned_to else "-"
            progress = task_queries.progress_percentage(task)
            logger.info(f"  [{'x' if task.completed else ' '}] {task.title} (assigned: {assignee}, {progress:.0f}%)")

        partner_stats = task_queries.partner_statistics(store.partners, status_vocabulary(settings.skin))
        logger.info(f"Partners: {partner_stats.total} total, {partner_stats.accepted} accepted")
        for partner in store.partners:
            summary = task_queries.partner_summary(partner, store.tasks)
            logger.info(f"  {partner.name} <{partner.email}> {partner.status}: {summary.task_count} tasks")

        logger.info(f"Task lists: {len(store.task_lists)}")


if __name__ == "__main__":
    asyncio.run(main())
