"""Part schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from app.models.part import PartStatus
from app.schemas.part_history import HistoryEntryResponseSchema, as_utc


class PartCreateSchema(BaseModel):
    """Schema for creating a new part.

    ``id``, ``name`` and ``quantity`` are required but declared optional here
    so that a missing value is reported with the lifecycle rules' own
    message instead of a generic validation error.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str | None = Field(
        None,
        max_length=100,
        description="User-chosen unique part identifier",
        json_schema_extra={"example": "P-1001"}
    )
    name: str | None = Field(
        None,
        max_length=255,
        description="Part name",
        json_schema_extra={"example": "Hydraulic pump housing"}
    )
    quantity: StrictInt | str | None = Field(
        None,
        description="Initial quantity (non-negative integer)",
        json_schema_extra={"example": 10}
    )
    location: str | None = Field(
        None,
        max_length=255,
        description="Storage location",
        json_schema_extra={"example": "Shelf B3"}
    )
    serial_number: str | None = Field(
        None,
        max_length=255,
        description="Serial number",
        json_schema_extra={"example": "SN-4471"}
    )
    project_name: str | None = Field(
        None,
        max_length=255,
        description="Project the part belongs to",
        json_schema_extra={"example": "Harbor crane refit"}
    )
    project_number: str | None = Field(
        None,
        max_length=100,
        description="Project number",
        json_schema_extra={"example": "PRJ-2024-017"}
    )
    description: str | None = Field(
        None,
        description="Free text description",
        json_schema_extra={"example": "Cast housing, needs machining"}
    )
    status: PartStatus | None = Field(
        None,
        description="Initial status, defaults to Received",
        json_schema_extra={"example": "Received"}
    )
    user_id: str | None = Field(
        None,
        description="Acting user identifier",
        json_schema_extra={"example": "alice@example.com"}
    )


class PartUpdateSchema(BaseModel):
    """Schema for replacing the attributes of an existing part.

    ``quantity`` may only be echoed back unchanged and ``history`` is ignored.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str | None = Field(
        None,
        description="Part identifier; must match the identifier in the URL when given",
        json_schema_extra={"example": "P-1001"}
    )
    name: str | None = Field(
        None,
        max_length=255,
        description="Part name",
        json_schema_extra={"example": "Hydraulic pump housing"}
    )
    quantity: StrictInt | None = Field(
        None,
        description="Current quantity, echoed back unchanged",
        json_schema_extra={"example": 10}
    )
    location: str | None = Field(None, max_length=255, description="Storage location")
    serial_number: str | None = Field(None, max_length=255, description="Serial number")
    project_name: str | None = Field(None, max_length=255, description="Project the part belongs to")
    project_number: str | None = Field(None, max_length=100, description="Project number")
    description: str | None = Field(None, description="Free text description")
    status: PartStatus | None = Field(
        None,
        description="New status; a change is recorded as a status update",
        json_schema_extra={"example": "In Work"}
    )
    version: StrictInt | None = Field(
        None,
        description="Version the client last read; a stale version is rejected",
        json_schema_extra={"example": 3}
    )
    user_id: str | None = Field(
        None,
        description="Acting user identifier",
        json_schema_extra={"example": "alice@example.com"}
    )


class PartResponseSchema(BaseModel):
    """Schema for a part with its full history."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(description="Part identifier", json_schema_extra={"example": "P-1001"})
    name: str = Field(description="Part name", json_schema_extra={"example": "Hydraulic pump housing"})
    location: str | None = Field(None, description="Storage location")
    serial_number: str | None = Field(None, description="Serial number")
    project_name: str | None = Field(None, description="Project the part belongs to")
    project_number: str | None = Field(None, description="Project number")
    description: str | None = Field(None, description="Free text description")
    quantity: int = Field(description="Quantity on hand", json_schema_extra={"example": 7})
    status: PartStatus = Field(description="Workflow status", json_schema_extra={"example": "Received"})
    version: int = Field(description="Concurrency token, bumped on every write", json_schema_extra={"example": 2})
    history: list[HistoryEntryResponseSchema] = Field(
        default_factory=list,
        description="Audit trail in chronological order"
    )
    created_at: datetime | None = Field(None, description="When the part was created")
    updated_at: datetime | None = Field(None, description="When the part was last written")

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)
