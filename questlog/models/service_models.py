"""Pydantic models for service layer return types.

These models give consumers typed, read-only views of store state and of the
statistics derived from it.
"""

from pydantic import BaseModel, ConfigDict

from questlog.domain.partner import Partner, PartnerStatus
from questlog.domain.task import Task
from questlog.domain.task_list import TaskList


class StoreSnapshot(BaseModel):
    """Immutable view of the task store handed to subscribers."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[Task, ...]
    partners: tuple[Partner, ...]
    task_lists: tuple[TaskList, ...]
    loading: bool


class TaskStatistics(BaseModel):
    """Aggregate counts over a task collection."""

    total: int
    completed: int
    pending: int
    shared: int
    assigned: int
    completed_xp: int
    total_xp: int


class PartnerStatistics(BaseModel):
    """Partner counts by relationship status."""

    total: int
    accepted: int
    pending: int
    declined: int


class PartnerSummary(BaseModel):
    """Per-partner view of the tasks assigned to or shared with them."""

    partner_id: str
    name: str
    status: PartnerStatus
    task_count: int
    completed_count: int
    completed_xp: int
