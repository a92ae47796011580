"""Update structs for shallow-merge operations.

Every field is optional; only fields explicitly set on the struct override the
stored record. Only fields that are optional on the record itself may be set
to None; clearing any other field is rejected at construction.
"""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from questlog.domain.partner import Partner
from questlog.domain.task import Priority, SubTask, Task


class UpdateModel(BaseModel):
    """Base for partial updates."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    # Fields the record itself allows to be None
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_cleared_required_fields(self) -> "UpdateModel":
        """Reject an explicit None for a field the record requires."""
        cleared = sorted(
            name
            for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.nullable_fields
        )
        if cleared:
            raise ValueError(f"Cannot clear required fields: {', '.join(cleared)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the explicitly set fields, keyed by attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskUpdate(UpdateModel):
    """Partial update for a task."""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description", "due_date", "assigned_to"})

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    assigned_to: str | None = None
    tags: list[str] | None = None
    collaborators: list[str] | None = None
    shared_with: list[str] | None = None
    sub_tasks: list[SubTask] | None = None
    is_checklist: bool | None = None
    xp_reward: int | None = None


class SubTaskUpdate(UpdateModel):
    """Partial update for a sub-item."""

    title: str | None = None
    completed: bool | None = None
    xp_reward: int | None = None


class TaskListUpdate(UpdateModel):
    """Partial update for a task list."""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description", "color", "emoji"})

    title: str | None = None
    description: str | None = None
    tasks: list[Task | str] | None = None
    owner: str | None = None
    collaborators: list[Partner | str] | None = None
    color: str | None = None
    emoji: str | None = None
