"""Pydantic schemas for Portfolio model."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from folio.schemas.common import reject_null
from folio.schemas.investment import InvestmentWithTotals


class PortfolioBase(BaseModel):
    """Base Portfolio schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)


class PortfolioCreate(PortfolioBase):
    """Schema for creating a new Portfolio."""

    pass


class PortfolioUpdate(BaseModel):
    """Schema for updating an existing Portfolio."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: str | None, info: ValidationInfo) -> str:
        return reject_null(v, info)


class Portfolio(PortfolioBase):
    """Schema for Portfolio responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime


class PortfolioSummary(Portfolio):
    """Portfolio with aggregate values for list endpoints."""

    investment_count: int = 0
    total_invested: Decimal = Decimal("0")
    total_distributions: Decimal = Decimal("0")
    total_value: Decimal = Decimal("0")


class PortfolioDetail(PortfolioSummary):
    """Portfolio with its investments."""

    investments: list[InvestmentWithTotals] = []
