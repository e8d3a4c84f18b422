"""Snapshots API router - daily value history."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from folio.dependencies.user_scope import get_current_user_id, get_scoped_db
from folio.schemas.snapshot import (
    InvestmentValuePoint,
    PortfolioSnapshot,
    SnapshotSaveResult,
    UserSnapshot,
)
from folio.services.snapshot_service import SnapshotService

router = APIRouter(prefix="/api/snapshots", tags=["snapshots"])


@router.post("", response_model=SnapshotSaveResult)
async def save_snapshots(
    snapshot_date: date | None = None,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Save the current user's snapshots for a date (default: today).

    Saving the same date again overwrites that day's rows.
    """
    result = SnapshotService(db, user_id).save_snapshots(snapshot_date)
    db.commit()
    return result


@router.get("/user", response_model=list[UserSnapshot])
async def get_user_history(
    days: int = Query(30, ge=1, le=3650, description="Number of days of history"),
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """User-level history for the last ``days`` days, oldest first."""
    return SnapshotService(db, user_id).get_user_history(days)


@router.get("/portfolio/{portfolio_id}", response_model=list[PortfolioSnapshot])
async def get_portfolio_history(
    portfolio_id: int,
    days: int = Query(30, ge=1, le=3650, description="Number of days of history"),
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    return SnapshotService(db, user_id).get_portfolio_history(portfolio_id, days)


@router.get("/investment/{investment_id}", response_model=list[InvestmentValuePoint])
async def get_investment_history(
    investment_id: int,
    days: int = Query(30, ge=1, le=3650, description="Number of days of history"),
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    return SnapshotService(db, user_id).get_investment_history(investment_id, days)
