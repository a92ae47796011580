"""Shared configuration for persisted domain records."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for records stored in the key-value collections.

    Records are immutable; changes produce a new record via model_copy.
    Persisted JSON uses camelCase keys and unknown keys are kept verbatim so
    that presentation-only fields survive a load/save cycle.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )
