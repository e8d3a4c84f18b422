"""Portfolios API router."""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from folio.config import settings
from folio.dependencies.user_scope import get_current_user_id, get_scoped_db
from folio.models import Portfolio
from folio.routers.investments import with_totals
from folio.schemas.common import MessageResponse
from folio.schemas.portfolio import Portfolio as PortfolioSchema
from folio.schemas.portfolio import (
    PortfolioCreate,
    PortfolioDetail,
    PortfolioSummary,
    PortfolioUpdate,
)
from folio.services.market_data import refresh_prices_background
from folio.services.portfolio import ValuationService
from folio.services.repositories import PortfolioRepository

router = APIRouter(prefix="/api/portfolios", tags=["portfolios"])


def _summary(portfolio: Portfolio) -> PortfolioSummary:
    totals = ValuationService.value_portfolio(portfolio)
    return PortfolioSummary(
        id=portfolio.id,
        user_id=portfolio.user_id,
        name=portfolio.name,
        description=portfolio.description,
        created_at=portfolio.created_at,
        updated_at=portfolio.updated_at,
        investment_count=totals.investment_count,
        total_invested=totals.total_invested,
        total_distributions=totals.total_distributions,
        total_value=totals.total_value,
    )


@router.get("", response_model=list[PortfolioSummary])
async def list_portfolios(
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """List the current user's portfolios with summaries, newest first."""
    return [_summary(portfolio) for portfolio in PortfolioRepository(db, user_id).find_all()]


@router.post("", response_model=PortfolioSchema, status_code=status.HTTP_201_CREATED)
async def create_portfolio(
    portfolio: PortfolioCreate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Create a new portfolio for the current user."""
    db_portfolio = PortfolioRepository(db, user_id).create(
        name=portfolio.name, description=portfolio.description
    )
    db.commit()
    return db_portfolio


@router.get("/{portfolio_id}", response_model=PortfolioDetail)
async def get_portfolio(
    portfolio_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Get a portfolio with its investments.

    Stale stock prices are refreshed in the background; the response carries
    the prices currently stored.
    """
    portfolio = PortfolioRepository(db, user_id).get_with_investments(portfolio_id)

    if settings.alpha_vantage_api_key:
        background_tasks.add_task(refresh_prices_background, user_id, portfolio_id)

    investments = sorted(
        portfolio.investments, key=lambda i: (i.created_at, i.id), reverse=True
    )
    return PortfolioDetail(
        **_summary(portfolio).model_dump(),
        investments=[with_totals(investment) for investment in investments],
    )


@router.put("/{portfolio_id}", response_model=PortfolioSchema)
async def update_portfolio(
    portfolio_id: int,
    portfolio_update: PortfolioUpdate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Update name and/or description of a portfolio."""
    portfolio = PortfolioRepository(db, user_id).update(
        portfolio_id, **portfolio_update.model_dump(exclude_unset=True)
    )
    db.commit()
    return portfolio


@router.delete("/{portfolio_id}", response_model=MessageResponse)
async def delete_portfolio(
    portfolio_id: int,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Delete an empty portfolio."""
    PortfolioRepository(db, user_id).delete(portfolio_id)
    db.commit()
    return MessageResponse(message=f"Portfolio {portfolio_id} deleted")
