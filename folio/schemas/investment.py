"""Pydantic schemas for Investment model."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from folio.schemas.common import reject_null
from folio.schemas.distribution import Distribution
from folio.schemas.label import Label


class InvestmentBase(BaseModel):
    """Base Investment schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    date_started: date | None = None
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Principal")
    investment_type: str = Field(
        ..., min_length=1, max_length=100, description="Free text, e.g. stocks, crypto"
    )
    has_distributions: bool = True
    stock_symbol: str | None = Field(None, max_length=20)
    stock_quantity: Decimal | None = Field(None, ge=0)
    current_stock_price: Decimal | None = Field(None, ge=0)


class InvestmentCreate(InvestmentBase):
    """Schema for creating an investment, optionally with labels."""

    portfolio_id: int
    category_ids: list[int] = []
    tag_ids: list[int] = []


class InvestmentUpdate(BaseModel):
    """Schema for updating an investment.

    Label id lists replace the current associations when present.
    """

    portfolio_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    date_started: date | None = None
    amount: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    investment_type: str | None = Field(None, min_length=1, max_length=100)
    has_distributions: bool | None = None
    stock_symbol: str | None = Field(None, max_length=20)
    stock_quantity: Decimal | None = Field(None, ge=0)
    current_stock_price: Decimal | None = Field(None, ge=0)
    category_ids: list[int] | None = None
    tag_ids: list[int] | None = None

    @field_validator("portfolio_id", "name", "amount", "investment_type", "has_distributions")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        return reject_null(v, info)


class Investment(InvestmentBase):
    """Schema for Investment responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    portfolio_id: int
    stock_price_updated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class InvestmentWithTotals(Investment):
    """Investment with derived values."""

    total_distributions: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    current_return: Decimal = Decimal("0")


class InvestmentDetail(InvestmentWithTotals):
    """Investment with labels and distributions (newest first)."""

    categories: list[Label] = []
    tags: list[Label] = []
    distributions: list[Distribution] = []
