"""Repository-specific exceptions.

These exceptions provide semantic meaning for data access errors,
separating them from general database errors.
"""

from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class RepositoryError(Exception):
    """Base exception for repository operations."""


class NotFoundError(RepositoryError):
    """Entity not found in database.

    Also raised when the entity exists but belongs to another user, so callers
    cannot tell the two cases apart.
    """

    def __init__(self, entity_type: str, identifier: str | int):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} not found: {identifier}")


class DuplicateError(RepositoryError):
    """Entity already exists (unique constraint violation)."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}={value} already exists")


class ConstraintViolationError(RepositoryError):
    """Write rejected by a domain rule (children present, cross-tenant link, negative amount)."""


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the integrity error came from a unique constraint or index."""
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(error.orig)
