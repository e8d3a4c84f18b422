"""Background refresh of stale stock prices.

Prices are a derived, best-effort field: a failed or throttled refresh only
leaves them stale. The background entry point never raises.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from folio.config import settings
from folio.database import SessionLocal
from folio.services.market_data.alpha_vantage_client import (
    AlphaVantageClient,
    QuoteProviderError,
    QuoteRateLimitError,
)
from folio.services.repositories import InvestmentRepository
from folio.services.session_scope import bind_session_identity

logger = logging.getLogger(__name__)


class PriceRefreshService:
    """Refreshes current_stock_price for one user's stale stock investments."""

    def __init__(
        self,
        db: Session,
        user_id: int,
        client: AlphaVantageClient,
        max_age_hours: int | None = None,
        batch_size: int | None = None,
    ) -> None:
        self.investments = InvestmentRepository(db, user_id)
        self.client = client
        self.max_age = timedelta(
            hours=settings.price_max_age_hours if max_age_hours is None else max_age_hours
        )
        self.batch_size = settings.price_refresh_batch_size if batch_size is None else batch_size

    def refresh_stale_prices(self, portfolio_id: int | None = None) -> dict:
        """
        Fetch quotes for stale investments, at most ``batch_size`` calls.

        Stops at the first rate-limit response; other per-symbol failures are
        logged and skipped.

        Returns:
            {"updated": n, "failed": n, "rate_limited": bool}
        """
        stats = {"updated": 0, "failed": 0, "rate_limited": False}
        now = datetime.now()
        stale = self.investments.find_stale_stocks(
            older_than=now - self.max_age, limit=self.batch_size, portfolio_id=portfolio_id
        )
        if not stale:
            return stats

        for investment in stale:
            try:
                quote = self.client.get_quote(investment.stock_symbol)
            except QuoteRateLimitError:
                logger.warning("Quote provider rate limit reached, stopping price refresh")
                stats["rate_limited"] = True
                break
            except (QuoteProviderError, ValueError) as e:
                logger.warning(f"Price refresh failed for {investment.stock_symbol}: {e}")
                stats["failed"] += 1
                continue

            self.investments.update_stock_price(investment, quote.price, now)
            stats["updated"] += 1

        logger.info(
            f"Price refresh for user {self.investments.user_id}: {stats['updated']} updated, "
            f"{stats['failed']} failed, rate_limited={stats['rate_limited']}"
        )
        return stats


def refresh_prices_background(
    user_id: int,
    portfolio_id: int | None = None,
    session_factory: Callable[[], Session] = SessionLocal,
) -> None:
    """Refresh stale prices in a background task. Never raises."""
    db = session_factory()
    try:
        bind_session_identity(db, user_id)
        with AlphaVantageClient() as client:
            PriceRefreshService(db, user_id, client).refresh_stale_prices(portfolio_id)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Background price refresh failed for user {user_id}")
    finally:
        db.close()
