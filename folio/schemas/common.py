"""Common response schemas used across the API."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo


def reject_null(value: Any, info: ValidationInfo) -> Any:
    """Update fields may be omitted, but a required column cannot be set to null."""
    if value is None:
        raise ValueError(f"{info.field_name} cannot be null")
    return value


class ErrorResponse(BaseModel):
    """Standard error response format for API errors.

    Attributes:
        error: Error code (e.g., 'NotFound', 'ConstraintViolation')
        message: Human-readable error message
        timestamp: When the error occurred
        path: Request path that caused the error
    """

    error: str = Field(..., description="Error code (e.g., 'NotFound', 'ConstraintViolation')")
    message: str = Field(..., description="Human-readable error message")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    path: str | None = Field(None, description="Request path that caused the error")


class MessageResponse(BaseModel):
    """Simple message response for operations that return only a message.

    Attributes:
        message: The response message
    """

    message: str
