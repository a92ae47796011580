"""Task list (aka quest board) domain model."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from questlog.domain.base import RecordModel
from questlog.domain.partner import Partner
from questlog.domain.task import Task


class TaskList(RecordModel):
    """Named grouping of tasks with an owner and collaborators."""

    id: str = Field(..., description="Unique task list ID")
    title: str = Field(..., description="List title")
    description: str | None = Field(default=None, description="Optional description")
    tasks: list[Task | str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tasks", "quests"),
        serialization_alias="tasks",
        description="Task IDs or embedded tasks",
    )
    owner: str = Field(default="", description="Owner user ID")
    collaborators: list[Partner | str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("collaborators", "allies"),
        serialization_alias="collaborators",
        description="Partner IDs or embedded partners",
    )
    color: str | None = Field(default=None, description="Display color")
    emoji: str | None = Field(default=None, description="Display emoji")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @field_validator("tasks", "collaborators", mode="before")
    @classmethod
    def default_missing_list(cls, v: Any) -> Any:  # noqa: ANN401
        """Treat null as an empty list."""
        return [] if v is None else v
