"""Inventory schemas for request/response validation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from app.models.part import PartStatus
from app.services.part_lifecycle import QuantityChangeType


class CheckInOutSchema(BaseModel):
    """Schema for checking stock in or out of a part."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    part_id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the part to change",
        json_schema_extra={"example": "P-1001"}
    )
    type: QuantityChangeType = Field(
        ...,
        description="Direction of the change",
        json_schema_extra={"example": "check-out"}
    )
    change: StrictInt | str = Field(
        ...,
        description="Amount to move (positive integer)",
        json_schema_extra={"example": 3}
    )
    new_quantity: StrictInt | None = Field(
        None,
        description="Quantity the client expects afterwards; a mismatch is rejected without writing",
        json_schema_extra={"example": 7}
    )
    user_id: str | None = Field(
        None,
        description="Acting user identifier",
        json_schema_extra={"example": "alice@example.com"}
    )


class StatusUpdateSchema(BaseModel):
    """Schema for moving a part to another status."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    part_id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the part to change",
        json_schema_extra={"example": "P-1001"}
    )
    new_status: PartStatus | None = Field(
        None,
        description="Target status; must differ from the current one",
        json_schema_extra={"example": "In Work"}
    )
    user_id: str | None = Field(
        None,
        description="Acting user identifier",
        json_schema_extra={"example": "alice@example.com"}
    )

    @field_validator("new_status", mode="before")
    @classmethod
    def blank_status_is_none(cls, value: Any) -> Any:
        """Treat an unselected status (empty string) as no status."""
        if isinstance(value, str) and not value.strip():
            return None
        return value
