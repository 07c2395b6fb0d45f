"""Part history schemas for response serialization."""

from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from app.models.part import PartStatus
from app.models.part_history import HistoryType


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps read back from the store."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class HistoryEntryResponseSchema(BaseModel):
    """Schema for one audit record of a part mutation.

    Fields that do not apply to the entry's type are left out of the output.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    type: HistoryType = Field(
        description="Kind of mutation",
        json_schema_extra={"example": "check-out"}
    )
    change: int | None = Field(
        None,
        description="Quantity moved (initial-add, check-in and check-out entries)",
        json_schema_extra={"example": 3}
    )
    old_status: PartStatus | None = Field(
        None,
        description="Status before a status update",
        json_schema_extra={"example": "In Work"}
    )
    new_status: PartStatus | None = Field(
        None,
        description="Status after a status update",
        json_schema_extra={"example": "Completed"}
    )
    timestamp: datetime = Field(
        description="When the mutation was applied (UTC)",
        json_schema_extra={"example": "2024-01-15T14:45:00Z"}
    )
    user: str = Field(
        description="Acting user, 'Anonymous' when unknown",
        json_schema_extra={"example": "alice@example.com"}
    )

    @field_validator("timestamp")
    @classmethod
    def timestamp_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)  # type: ignore[return-value]

    @model_serializer(mode="wrap")
    def drop_unused_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}
