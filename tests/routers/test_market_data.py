"""Tests for the stock market data router."""

from decimal import Decimal
from unittest.mock import patch

from folio.services.market_data import (
    QuoteProviderError,
    QuoteProviderNotConfiguredError,
    QuoteRateLimitError,
    StockQuote,
    StockSymbol,
)
from tests.conftest import act_as

CLIENT = "folio.routers.market_data.AlphaVantageClient"


def quote(symbol="AAPL", price="187.34"):
    return StockQuote(
        symbol=symbol,
        price=Decimal(price),
        open=Decimal("185"),
        high=Decimal("188"),
        low=Decimal("184"),
        volume=100,
        latest_trading_day="2026-01-30",
        previous_close=Decimal("184.90"),
        change=Decimal("2.44"),
        change_percent="1.32%",
    )


def test_get_quote(client, user_a):
    act_as(user_a.id)
    with patch(f"{CLIENT}.get_quote", return_value=quote()):
        response = client.get("/api/stocks/quote/AAPL")

    assert response.status_code == 200
    assert response.json()["symbol"] == "AAPL"
    assert Decimal(response.json()["price"]) == Decimal("187.34")


def test_search(client, user_a):
    act_as(user_a.id)
    match = StockSymbol("AAPL", "Apple Inc", "Equity", "United States", "USD", 1.0)
    with patch(f"{CLIENT}.search_symbols", return_value=[match]):
        response = client.get("/api/stocks/search", params={"keywords": "apple"})

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Apple Inc"


def test_rate_limited_provider_returns_429(client, user_a):
    act_as(user_a.id)
    with patch(f"{CLIENT}.get_quote", side_effect=QuoteRateLimitError("Note")):
        response = client.get("/api/stocks/quote/AAPL")

    assert response.status_code == 429
    assert response.json()["error"] == "QuoteRateLimited"


def test_unconfigured_provider_returns_503(client, user_a):
    act_as(user_a.id)
    with patch(f"{CLIENT}.get_quote", side_effect=QuoteProviderNotConfiguredError("no key")):
        assert client.get("/api/stocks/quote/AAPL").status_code == 503


def test_provider_failure_returns_502(client, user_a):
    act_as(user_a.id)
    with patch(f"{CLIENT}.get_quote", side_effect=QuoteProviderError("no data")):
        assert client.get("/api/stocks/quote/NOPE").status_code == 502
