"""Base classes for all domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def local_now() -> datetime:
    """Current time as an aware datetime in the server's local timezone."""
    return datetime.now().astimezone()


class ApiModel(BaseModel):
    """Base class for models exchanged with the dashboard.

    Python code uses snake_case attributes; the wire format is camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class ImmutableModel(ApiModel):
    """Wire model that cannot be mutated after construction."""

    model_config = ConfigDict(frozen=True)


class BaseEntity(ImmutableModel):
    """Base class for stored entities.

    Provides:
    - String ID assigned by the owning store
    - Created/updated timestamps
    - Immutability (stores replace records instead of mutating them)
    """

    model_config = ConfigDict(validate_default=True)

    id: str = Field(description="Unique entity identifier")
    created_at: datetime = Field(
        default_factory=local_now,
        description="When entity was created",
    )
    updated_at: datetime = Field(
        default_factory=local_now,
        description="When entity was last updated",
    )

    def touched(self, **updates):
        """Return a copy with the given updates and a fresh updated_at."""
        return self.model_copy(update={**updates, "updated_at": local_now()})
