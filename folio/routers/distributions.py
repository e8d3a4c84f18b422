"""Distributions API router - dividends and other returns on an investment."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from folio.dependencies.user_scope import get_current_user_id, get_scoped_db
from folio.schemas.common import MessageResponse
from folio.schemas.distribution import Distribution as DistributionSchema
from folio.schemas.distribution import DistributionCreate, DistributionUpdate
from folio.services.repositories import DistributionRepository

router = APIRouter(prefix="/api", tags=["distributions"])


@router.get("/investments/{investment_id}/distributions", response_model=list[DistributionSchema])
async def list_distributions(
    investment_id: int,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """List distributions of an investment, newest date first."""
    return DistributionRepository(db, user_id).find_by_investment(investment_id)


@router.post(
    "/investments/{investment_id}/distributions",
    response_model=DistributionSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_distribution(
    investment_id: int,
    distribution: DistributionCreate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Record a distribution on an investment."""
    db_distribution = DistributionRepository(db, user_id).create(
        investment_id,
        distribution_date=distribution.date,
        amount=distribution.amount,
        description=distribution.description,
    )
    db.commit()
    return db_distribution


@router.put("/distributions/{distribution_id}", response_model=DistributionSchema)
async def update_distribution(
    distribution_id: int,
    distribution_update: DistributionUpdate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    distribution = DistributionRepository(db, user_id).update(
        distribution_id, **distribution_update.model_dump(exclude_unset=True)
    )
    db.commit()
    return distribution


@router.delete("/distributions/{distribution_id}", response_model=MessageResponse)
async def delete_distribution(
    distribution_id: int,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    DistributionRepository(db, user_id).delete(distribution_id)
    db.commit()
    return MessageResponse(message=f"Distribution {distribution_id} deleted")
