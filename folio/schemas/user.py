"""Pydantic schemas for User model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from folio.schemas.common import reject_null


class UserBase(BaseModel):
    """Base User schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class UserCreate(UserBase):
    """Schema for creating a user (development only)."""

    pass


class UserUpdate(BaseModel):
    """Schema for updating the current user."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")

    @field_validator("name", "email")
    @classmethod
    def not_null(cls, v: str | None, info: ValidationInfo) -> str:
        return reject_null(v, info)


class User(UserBase):
    """Schema for User responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
