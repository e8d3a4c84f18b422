"""Binding a request's identity to its database session.

The identity is stored on the SQLAlchemy session and, on PostgreSQL, pushed
into the transaction-local setting ``app.user_id`` that the row-level
security policies read. Because the setting is transaction-local it never
outlives the transaction, so a pooled connection handed to another request
carries no identity. An ``after_begin`` listener re-applies it whenever the
bound session starts a new transaction (e.g. after a commit).
"""

import logging

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, SessionTransaction

from folio.constants import SESSION_USER_INFO_KEY, SESSION_USER_SETTING

logger = logging.getLogger(__name__)


class StorageUnavailableError(Exception):
    """The database could not be reached."""


def _apply_identity(connection: Connection, user_id: int) -> None:
    if connection.dialect.name != "postgresql":
        return
    connection.execute(
        text("SELECT set_config(:name, :value, true)"),
        {"name": SESSION_USER_SETTING, "value": str(user_id)},
    )


@event.listens_for(Session, "after_begin")
def _reapply_identity(
    session: Session, transaction: SessionTransaction, connection: Connection
) -> None:
    user_id = session.info.get(SESSION_USER_INFO_KEY)
    if user_id is not None:
        _apply_identity(connection, user_id)


def bind_session_identity(db: Session, user_id: int) -> None:
    """Scope every following statement on ``db`` to ``user_id``.

    Must be called before any tenant-scoped query on the session.

    Raises:
        StorageUnavailableError: If no connection can be acquired.
    """
    already_begun = db.in_transaction()
    db.info[SESSION_USER_INFO_KEY] = user_id
    try:
        connection = db.connection()
        if already_begun:
            # after_begin has already fired for this transaction
            _apply_identity(connection, user_id)
    except DBAPIError as e:
        db.info.pop(SESSION_USER_INFO_KEY, None)
        logger.error(f"Could not bind identity {user_id}: {e}")
        raise StorageUnavailableError("Database connection failed") from e


def session_user_id(db: Session) -> int:
    """Return the identity bound to ``db``.

    Raises:
        RuntimeError: If ``bind_session_identity`` was never called.
    """
    user_id = db.info.get(SESSION_USER_INFO_KEY)
    if user_id is None:
        raise RuntimeError("Session has no bound identity")
    return user_id
