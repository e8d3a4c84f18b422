"""Pydantic schemas for daily snapshots."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class PortfolioSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    portfolio_id: int
    snapshot_date: date
    total_value: Decimal
    total_invested: Decimal
    total_distributions: Decimal
    investment_count: int


class UserSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    snapshot_date: date
    total_value: Decimal
    total_invested: Decimal
    total_distributions: Decimal
    portfolio_count: int
    investment_count: int


class InvestmentValuePoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    investment_id: int
    snapshot_date: date
    stock_price: Decimal | None = None
    stock_quantity: Decimal | None = None
    value: Decimal
    total_distributions: Decimal


class SnapshotSaveResult(BaseModel):
    """Counts of snapshot rows written for the current user."""

    snapshot_date: date
    portfolios_saved: int
    investments_saved: int
