"""Pydantic schemas for categories, tags and investment types."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LabelCreate(BaseModel):
    """Schema for creating or renaming a label."""

    name: str = Field(..., min_length=1, max_length=100)


class Label(BaseModel):
    """Schema for label responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    created_at: datetime
