"""Task domain models and enums."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from questlog.domain.base import RecordModel


class Priority(StrEnum):
    """Task priority (task skin) or quest difficulty (quest skin)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    # Quest skin
    EASY = "easy"
    HARD = "hard"
    LEGENDARY = "legendary"


class SubTask(RecordModel):
    """Checklist item owned by exactly one task."""

    id: str = Field(..., description="Unique within the parent task")
    title: str = Field(..., description="Sub-item title")
    completed: bool = Field(default=False, description="Whether the step is done")
    xp_reward: int = Field(default=0, description="Reward granted by the step (quest skin)")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class Task(RecordModel):
    """Task (aka quest) record.

    Accepts quest-skin keys on input (``subQuests``, ``isMultiStep``,
    ``allies``, ``difficulty``) and always writes the task-skin keys.
    """

    id: str = Field(..., description="Unique task ID, immutable")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    completed: bool = Field(default=False, description="Whether the task is done")
    priority: Priority = Field(
        default=Priority.MEDIUM,
        validation_alias=AliasChoices("priority", "difficulty"),
        serialization_alias="priority",
    )
    due_date: datetime | None = Field(default=None, description="Optional deadline")
    assigned_to: str | None = Field(default=None, description="Partner ID of the responsible party")
    created_by: str = Field(default="", description="Creator ID")
    tags: list[str] = Field(default_factory=list)
    collaborators: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("collaborators", "allies"),
        serialization_alias="collaborators",
        description="Partner IDs with edit rights",
    )
    shared_with: list[str] = Field(default_factory=list, description="Partner IDs with read rights")
    sub_tasks: list[SubTask] = Field(
        default_factory=list,
        validation_alias=AliasChoices("subTasks", "subQuests"),
        serialization_alias="subTasks",
    )
    is_checklist: bool = Field(
        default=False,
        validation_alias=AliasChoices("isChecklist", "isMultiStep"),
        serialization_alias="isChecklist",
        description="Display sub-items as tracked progress steps",
    )
    xp_reward: int = Field(default=0, description="Reward used for XP aggregation")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @field_validator("tags", "collaborators", "shared_with", "sub_tasks", mode="before")
    @classmethod
    def default_missing_list(cls, v: Any) -> Any:  # noqa: ANN401
        """Records written by older versions may carry null instead of a list."""
        return [] if v is None else v

    @field_validator("is_checklist", mode="before")
    @classmethod
    def default_missing_flag(cls, v: Any) -> Any:  # noqa: ANN401
        """Treat a null checklist flag as false."""
        return False if v is None else v

    def find_sub_task(self, sub_task_id: str) -> SubTask | None:
        """Return the sub-item with the given id, or None."""
        return next((sub for sub in self.sub_tasks if sub.id == sub_task_id), None)
