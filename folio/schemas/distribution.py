"""Pydantic schemas for Distribution model."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from folio.schemas.common import reject_null


class DistributionBase(BaseModel):
    """Base Distribution schema with common fields."""

    date: date_type
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    description: str | None = Field(None, max_length=1000)


class DistributionCreate(DistributionBase):
    """Schema for recording a distribution on an investment."""

    pass


class DistributionUpdate(BaseModel):
    """Schema for updating a distribution."""

    date: date_type | None = None
    amount: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    description: str | None = Field(None, max_length=1000)

    @field_validator("date", "amount")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info)


class Distribution(DistributionBase):
    """Schema for Distribution responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    investment_id: int
    created_at: datetime
