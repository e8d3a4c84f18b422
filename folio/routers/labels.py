"""Label API routers - categories, tags and investment types.

The three label kinds share one shape, so their routers are built by a
single factory.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from folio.dependencies.user_scope import get_current_user_id, get_scoped_db
from folio.models import Category, InvestmentType, Tag
from folio.schemas.common import MessageResponse
from folio.schemas.label import Label, LabelCreate
from folio.services.repositories import LabelRepository


def build_label_router(model: type, path: str) -> APIRouter:
    """CRUD router for one label kind mounted at /api/{path}."""
    router = APIRouter(prefix=f"/api/{path}", tags=[path])
    noun = model.__name__

    @router.get("", response_model=list[Label])
    async def list_labels(
        db: Session = Depends(get_scoped_db),
        user_id: int = Depends(get_current_user_id),
    ):
        return LabelRepository(db, user_id, model).find_all()

    @router.post("", response_model=Label, status_code=status.HTTP_201_CREATED)
    async def create_label(
        label: LabelCreate,
        db: Session = Depends(get_scoped_db),
        user_id: int = Depends(get_current_user_id),
    ):
        db_label = LabelRepository(db, user_id, model).create(label.name)
        db.commit()
        return db_label

    @router.put("/{label_id}", response_model=Label)
    async def rename_label(
        label_id: int,
        label: LabelCreate,
        db: Session = Depends(get_scoped_db),
        user_id: int = Depends(get_current_user_id),
    ):
        db_label = LabelRepository(db, user_id, model).rename(label_id, label.name)
        db.commit()
        return db_label

    @router.delete("/{label_id}", response_model=MessageResponse)
    async def delete_label(
        label_id: int,
        db: Session = Depends(get_scoped_db),
        user_id: int = Depends(get_current_user_id),
    ):
        LabelRepository(db, user_id, model).delete(label_id)
        db.commit()
        return MessageResponse(message=f"{noun} {label_id} deleted")

    return router


categories_router = build_label_router(Category, "categories")
tags_router = build_label_router(Tag, "tags")
investment_types_router = build_label_router(InvestmentType, "investment-types")
