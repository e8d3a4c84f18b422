"""Stock market data endpoints backed by Alpha Vantage."""

import logging

from fastapi import APIRouter, Depends, Query, Request

from folio.dependencies.user_scope import get_current_user_id
from folio.rate_limiter import limiter
from folio.schemas.market_data import StockQuoteResponse, StockSymbolMatch
from folio.services.market_data import AlphaVantageClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stocks", tags=["stocks"])


def get_quote_client():
    """Quote provider client, closed after the request."""
    with AlphaVantageClient() as client:
        yield client


@router.get("/search", response_model=list[StockSymbolMatch])
@limiter.limit("30/minute")
def search_stocks(
    request: Request,
    keywords: str = Query(..., min_length=1, max_length=100),
    client: AlphaVantageClient = Depends(get_quote_client),
    user_id: int = Depends(get_current_user_id),
):
    """Search stock symbols by company name or ticker."""
    return client.search_symbols(keywords)


@router.get("/quote/{symbol}", response_model=StockQuoteResponse)
@limiter.limit("30/minute")
def get_stock_quote(
    request: Request,
    symbol: str,
    client: AlphaVantageClient = Depends(get_quote_client),
    user_id: int = Depends(get_current_user_id),
):
    """Latest quote for a symbol."""
    logger.debug(f"Quote requested by user {user_id} for {symbol}")
    return client.get_quote(symbol)
