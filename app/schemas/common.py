"""
Common response schemas for consistent API structure.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format."""
    model_config = ConfigDict(from_attributes=True)

    error: str = Field(..., description="Error message", json_schema_extra={"example": "Cannot check out more parts than available (requested 5, have 2)"})
    code: str | None = Field(None, description="Machine readable error code", json_schema_extra={"example": "INSUFFICIENT_QUANTITY"})
    details: dict[str, Any] | list[Any] | str | None = Field(None, description="Additional error details", json_schema_extra={"example": {"message": "The requested quantity is not available"}})
