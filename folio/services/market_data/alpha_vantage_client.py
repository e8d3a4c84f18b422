"""Alpha Vantage client for stock symbol search and quotes.

The free tier allows roughly 25 requests per day. When the quota is used up
the API still answers 200 OK, with a "Note" or "Information" message instead
of data; that is reported as QuoteRateLimitError.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from folio.config import settings
from folio.services.shared.http_client import HTTPClient, HTTPClientError

logger = logging.getLogger(__name__)

THROTTLE_KEYS = ("Note", "Information")


class QuoteProviderError(Exception):
    """Quote provider failed or returned unusable data."""


class QuoteRateLimitError(QuoteProviderError):
    """Quote provider quota exhausted."""


class QuoteProviderNotConfiguredError(QuoteProviderError):
    """No API key configured."""


@dataclass
class StockSymbol:
    """A symbol search match."""

    symbol: str
    name: str
    type: str
    region: str
    currency: str
    match_score: float


@dataclass
class StockQuote:
    """Latest quote for a symbol."""

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


def _decimal(value: str | None) -> Decimal:
    try:
        return Decimal(value or "0")
    except InvalidOperation:
        return Decimal("0")


class AlphaVantageClient(HTTPClient):
    """Client for the Alpha Vantage query API."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        super().__init__(base_url=base_url or settings.alpha_vantage_base_url, timeout=15.0)
        self.api_key = settings.alpha_vantage_api_key if api_key is None else api_key

    def _query(self, function: str, **params: str) -> dict:
        if not self.api_key:
            raise QuoteProviderNotConfiguredError("Alpha Vantage API key not configured")

        try:
            data = self.get_json(
                "/query", params={"function": function, **params, "apikey": self.api_key}
            )
        except HTTPClientError as e:
            if e.status_code == 429:
                raise QuoteRateLimitError(f"Alpha Vantage API error: {e}") from e
            raise QuoteProviderError(f"Alpha Vantage API error: {e}") from e

        for key in THROTTLE_KEYS:
            if key in data:
                logger.warning(f"Alpha Vantage rate limit: {data[key]}")
                raise QuoteRateLimitError(data[key])
        return data

    def search_symbols(self, keywords: str) -> list[StockSymbol]:
        """Search symbols by keywords. Blank keywords return no matches."""
        if not keywords or not keywords.strip():
            return []

        data = self._query("SYMBOL_SEARCH", keywords=keywords.strip())
        matches = data.get("bestMatches")
        if matches is None:
            logger.warning(f"Alpha Vantage search returned no matches field: {data}")
            return []

        return [
            StockSymbol(
                symbol=match.get("1. symbol", ""),
                name=match.get("2. name", ""),
                type=match.get("3. type", ""),
                region=match.get("4. region", ""),
                currency=match.get("8. currency", ""),
                match_score=float(match.get("9. matchScore") or 0),
            )
            for match in matches
        ]

    def get_quote(self, symbol: str) -> StockQuote:
        """Latest quote for ``symbol``.

        Raises:
            ValueError: If the symbol is blank
            QuoteProviderError: If the provider has no data for the symbol
        """
        if not symbol or not symbol.strip():
            raise ValueError("Stock symbol is required")

        data = self._query("GLOBAL_QUOTE", symbol=symbol.strip().upper())
        quote = data.get("Global Quote") or {}
        if not quote.get("01. symbol"):
            raise QuoteProviderError("Invalid stock symbol or no data available")

        return StockQuote(
            symbol=quote["01. symbol"],
            price=_decimal(quote.get("05. price")),
            open=_decimal(quote.get("02. open")),
            high=_decimal(quote.get("03. high")),
            low=_decimal(quote.get("04. low")),
            volume=int(quote.get("06. volume") or 0),
            latest_trading_day=quote.get("07. latest trading day", ""),
            previous_close=_decimal(quote.get("08. previous close")),
            change=_decimal(quote.get("09. change")),
            change_percent=quote.get("10. change percent", ""),
        )
