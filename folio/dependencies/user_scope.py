"""Tenant-scoped database session dependencies."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from folio.database import get_db
from folio.dependencies.auth import resolve_current_user_id
from folio.services.schema_lifecycle import SchemaLifecycle
from folio.services.session_scope import bind_session_identity, session_user_id


def get_schema_lifecycle(request: Request) -> SchemaLifecycle:
    """Lifecycle manager created at startup (see folio.main)."""
    return request.app.state.schema_lifecycle


def get_scoped_db(
    db: Session = Depends(get_db),
    user_id: int = Depends(resolve_current_user_id),
    lifecycle: SchemaLifecycle = Depends(get_schema_lifecycle),
) -> Session:
    """
    Database session bound to the current user's identity.

    Ensures the schema on first use, then binds the identity so row-level
    security applies to every statement of the request.

    Usage:
        @router.get("/things")
        def list_things(db: Session = Depends(get_scoped_db)):
            user_id = session_user_id(db)
    """
    lifecycle.ensure()
    bind_session_identity(db, user_id)
    return db


def get_current_user_id(db: Session = Depends(get_scoped_db)) -> int:
    """User id bound to the request's scoped session."""
    return session_user_id(db)
