"""Users API router - current user profile and development user management."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from folio.config import settings
from folio.constants import DEFAULT_PORTFOLIO_NAME
from folio.dependencies.user_scope import get_current_user_id, get_scoped_db
from folio.schemas.user import User as UserSchema
from folio.schemas.user import UserCreate, UserUpdate
from folio.services.repositories import PortfolioRepository, UserRepository
from folio.services.session_scope import bind_session_identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _require_development() -> None:
    """User management outside the credential issuer exists for development only."""
    if settings.is_production:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User management is disabled in production",
        )


@router.get("/me", response_model=UserSchema)
async def get_me(
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get the current user's profile."""
    return UserRepository(db).get_by_id(user_id)


@router.put("/me", response_model=UserSchema)
async def update_me(
    user_update: UserUpdate,
    db: Session = Depends(get_scoped_db),
    user_id: int = Depends(get_current_user_id),
):
    """Update the current user's name and/or email."""
    users = UserRepository(db)
    user = users.update(users.get_by_id(user_id), **user_update.model_dump(exclude_unset=True))
    db.commit()
    return user


@router.get("", response_model=list[UserSchema])
async def list_users(db: Session = Depends(get_scoped_db)):
    """List all users (development only)."""
    _require_development()
    return UserRepository(db).find_all()


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate, db: Session = Depends(get_scoped_db)):
    """
    Create a user with a default portfolio (development only).

    The portfolio is written under the new user's identity.
    """
    _require_development()
    db_user = UserRepository(db).create(name=user.name, email=user.email)
    bind_session_identity(db, db_user.id)
    PortfolioRepository(db, db_user.id).create(DEFAULT_PORTFOLIO_NAME)
    db.commit()
    logger.info(f"Created development user {db_user.id}")
    return db_user
