"""Investments API router."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from folio.dependencies.user_scope import get_current_user_id, get_scoped_db
from folio.models import Investment
from folio.schemas.common import MessageResponse
from folio.schemas.investment import (
    InvestmentCreate,
    InvestmentDetail,
    InvestmentUpdate,
    InvestmentWithTotals,
)
from folio.services.portfolio import ValuationService
from folio.services.repositories import InvestmentRepository

router = APIRouter(prefix="/api/investments", tags=["investments"])


def with_totals(investment: Investment, schema: type[InvestmentWithTotals] = InvestmentWithTotals):
    """Serialize an investment together with its derived values."""
    totals = ValuationService.value_investment(investment)
    return schema.model_validate(investment).model_copy(
        update={
            "total_distributions": totals.total_distributions,
            "current_value": totals.current_value,
            "current_return": totals.current_return,
        }
    )


@router.get("", response_model=list[InvestmentWithTotals])
async def list_investments(
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """List all of the current user's investments across portfolios, newest first."""
    return [with_totals(investment) for investment in InvestmentRepository(db, user_id).find_all()]


@router.post("", response_model=InvestmentDetail, status_code=status.HTTP_201_CREATED)
async def create_investment(
    investment: InvestmentCreate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Create an investment in one of the user's portfolios.

    The investment and its category/tag associations are written in one
    transaction; a foreign label id rejects the whole request.
    """
    data = investment.model_dump()
    repository = InvestmentRepository(db, user_id)
    db_investment = repository.create(
        portfolio_id=data.pop("portfolio_id"),
        category_ids=data.pop("category_ids"),
        tag_ids=data.pop("tag_ids"),
        **data,
    )
    db.commit()
    return with_totals(repository.get_by_id(db_investment.id), InvestmentDetail)


@router.get("/{investment_id}", response_model=InvestmentDetail)
async def get_investment(
    investment_id: int,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get an investment with categories, tags and distributions (newest first)."""
    return with_totals(InvestmentRepository(db, user_id).get_by_id(investment_id), InvestmentDetail)


@router.put("/{investment_id}", response_model=InvestmentDetail)
async def update_investment(
    investment_id: int,
    investment_update: InvestmentUpdate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Update an investment.

    Supplying portfolio_id moves it to another of the user's portfolios;
    supplying category_ids or tag_ids replaces those associations.
    """
    data = investment_update.model_dump(exclude_unset=True)
    repository = InvestmentRepository(db, user_id)
    repository.update(
        investment_id,
        category_ids=data.pop("category_ids", None),
        tag_ids=data.pop("tag_ids", None),
        **data,
    )
    db.commit()
    return with_totals(repository.get_by_id(investment_id), InvestmentDetail)


@router.delete("/{investment_id}", response_model=MessageResponse)
async def delete_investment(
    investment_id: int,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Delete an investment with its distributions, label links and value history."""
    InvestmentRepository(db, user_id).delete(investment_id)
    db.commit()
    return MessageResponse(message=f"Investment {investment_id} deleted")
