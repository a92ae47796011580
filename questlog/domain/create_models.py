"""Pydantic models for creating records in the task store."""

import re
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from questlog.domain.partner import Partner
from questlog.domain.task import Priority


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _require_text(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} cannot be empty")
    return v


class SubTaskCreate(BaseModel):
    """Payload for a sub-item supplied together with a new task."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., description="Sub-item title")
    completed: bool = Field(default=False)
    xp_reward: int = Field(default=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not blank."""
        return _require_text(v, "Title")


class TaskCreate(BaseModel):
    """Payload for creating a task.

    The store assigns id and timestamps. Extra keys (e.g. a quest's
    ``category``) are carried onto the created record.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None)
    completed: bool = Field(default=False)
    priority: Priority = Field(default=Priority.MEDIUM, validation_alias=AliasChoices("priority", "difficulty"))
    due_date: datetime | None = Field(default=None)
    assigned_to: str | None = Field(default=None)
    created_by: str | None = Field(default=None, description="Defaults to the configured current user")
    tags: list[str] = Field(default_factory=list)
    collaborators: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("collaborators", "allies")
    )
    shared_with: list[str] = Field(default_factory=list)
    sub_tasks: list[SubTaskCreate] = Field(
        default_factory=list, validation_alias=AliasChoices("subTasks", "subQuests")
    )
    is_checklist: bool = Field(default=False, validation_alias=AliasChoices("isChecklist", "isMultiStep"))
    xp_reward: int = Field(default=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not blank."""
        return _require_text(v, "Title")

    @field_validator("description")
    @classmethod
    def blank_description_to_none(cls, v: str | None) -> str | None:
        """Store a blank description as absent."""
        if v is None:
            return None
        return v.strip() or None

    def extra_fields(self) -> dict[str, Any]:
        """Keys supplied beyond the modelled fields."""
        return dict(self.model_extra or {})


class PartnerInvite(BaseModel):
    """Validated invitation input."""

    email: str = Field(..., description="Email in local@domain.tld form")
    name: str = Field(..., description="Display name of the partner")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        return _require_text(v, "Name")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email matches local@domain.tld with no surrounding whitespace."""
        _require_text(v, "Email")
        if not EMAIL_PATTERN.match(v):
            msg = "Please enter a valid email address"
            raise ValueError(msg)
        return v


class TaskListCreate(BaseModel):
    """Payload for creating a task list. Tasks start empty."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    title: str = Field(..., description="List title")
    description: str | None = Field(default=None)
    owner: str | None = Field(default=None, description="Defaults to the configured current user")
    collaborators: list[Partner | str] = Field(
        default_factory=list, validation_alias=AliasChoices("collaborators", "allies")
    )
    color: str | None = Field(default=None)
    emoji: str | None = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not blank."""
        return _require_text(v, "Title")

    def extra_fields(self) -> dict[str, Any]:
        """Keys supplied beyond the modelled fields."""
        return dict(self.model_extra or {})
