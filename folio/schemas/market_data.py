"""Pydantic schemas for stock market data endpoints."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class StockSymbolMatch(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    name: str
    type: str
    region: str
    currency: str
    match_score: float


class StockQuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    price: Decimal
    open: Decimal
    high: Decimal
    low: Decimal
    volume: int
    latest_trading_day: str
    previous_close: Decimal
    change: Decimal
    change_percent: str
