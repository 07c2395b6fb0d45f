"""Pydantic schemas for request/response validation."""

# Import all schemas here for easy access
from app.schemas.common import ErrorResponseSchema
from app.schemas.health_schema import HealthResponse
from app.schemas.inventory import CheckInOutSchema, StatusUpdateSchema
from app.schemas.part import (
    PartCreateSchema,
    PartResponseSchema,
    PartUpdateSchema,
)
from app.schemas.part_history import HistoryEntryResponseSchema

__all__: list[str] = [
    "CheckInOutSchema",
    "ErrorResponseSchema",
    "HealthResponse",
    "HistoryEntryResponseSchema",
    "PartCreateSchema",
    "PartResponseSchema",
    "PartUpdateSchema",
    "StatusUpdateSchema",
]
