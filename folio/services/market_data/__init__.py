"""Market data services: quote provider client and price refresh."""

from .alpha_vantage_client import (
    AlphaVantageClient,
    QuoteProviderError,
    QuoteProviderNotConfiguredError,
    QuoteRateLimitError,
    StockQuote,
    StockSymbol,
)
from .price_refresh_service import PriceRefreshService, refresh_prices_background

__all__ = [
    "AlphaVantageClient",
    "PriceRefreshService",
    "QuoteProviderError",
    "QuoteProviderNotConfiguredError",
    "QuoteRateLimitError",
    "StockQuote",
    "StockSymbol",
    "refresh_prices_background",
]
