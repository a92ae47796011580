"""Partner (aka ally) domain models and enums."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import Field

from questlog.domain.base import RecordModel


class PartnerStatus(StrEnum):
    """Relationship status of a partner.

    Each skin uses its own three values; no transition table is enforced.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    # Quest skin
    INVITED = "invited"
    ALLIED = "allied"


@dataclass(frozen=True)
class StatusVocabulary:
    """The three statuses a skin uses for invitations."""

    initial: PartnerStatus
    accepted: PartnerStatus
    declined: PartnerStatus


STATUS_VOCABULARIES: dict[str, StatusVocabulary] = {
    "task": StatusVocabulary(PartnerStatus.PENDING, PartnerStatus.ACCEPTED, PartnerStatus.DECLINED),
    "quest": StatusVocabulary(PartnerStatus.INVITED, PartnerStatus.ALLIED, PartnerStatus.DECLINED),
}


def status_vocabulary(skin: Literal["task", "quest"]) -> StatusVocabulary:
    """Return the status vocabulary for a naming skin."""
    return STATUS_VOCABULARIES[skin]


class Partner(RecordModel):
    """Collaboration contact invited by the user."""

    id: str = Field(..., description="Unique partner ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address the invitation was made for")
    avatar: str | None = Field(default=None, description="Optional avatar URL")
    status: PartnerStatus = Field(default=PartnerStatus.PENDING, description="Relationship status")
    invited_at: datetime = Field(..., description="Invitation timestamp")
