from questlog.services import task_queries, task_store


__all__ = [
    "task_queries",
    "task_store",
]
