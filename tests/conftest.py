"""Shared test fixtures.

Every test database is an in-memory SQLite database built by the real
schema lifecycle (Alembic revisions), so tests exercise the same schema
path as a development deployment. Row-level security is PostgreSQL-only;
tenant isolation here is enforced by the scoped repositories.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from folio.database import get_db
from folio.main import app
from folio.models import User
from folio.rate_limiter import limiter
from folio.services.auth import DevelopmentOverrideStrategy
from folio.services.repositories import PortfolioRepository, UserRepository
from folio.services.schema_lifecycle import SchemaLifecycle
from folio.services.session_scope import bind_session_identity


def make_engine():
    """In-memory SQLite engine shared by every session of a test."""
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    """Engine with the schema migrated to head (no fixture users)."""
    engine = make_engine()
    SchemaLifecycle(engine, production=False, seed_dev_users=False).ensure()
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """Create a database session."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


def create_user(db, name: str, email: str) -> User:
    user = UserRepository(db).create(name=name, email=email)
    db.commit()
    return user


@pytest.fixture
def user_a(db) -> User:
    return create_user(db, "Alice", "alice@example.com")


@pytest.fixture
def user_b(db) -> User:
    return create_user(db, "Bob", "bob@example.com")


@pytest.fixture
def portfolio_a(db, user_a):
    """Portfolio "Growth" owned by user A."""
    bind_session_identity(db, user_a.id)
    portfolio = PortfolioRepository(db, user_a.id).create("Growth", "Long term")
    db.commit()
    return portfolio


@pytest.fixture
def client(engine, session_factory):
    """Test client on the in-memory database, acting as user 1 until told otherwise.

    Yields the TestClient; switch identities with ``act_as``.
    """
    limiter.reset()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    original_strategy = app.state.identity_strategy
    original_lifecycle = app.state.schema_lifecycle
    app.state.identity_strategy = DevelopmentOverrideStrategy(default_user_id=1)
    app.state.schema_lifecycle = SchemaLifecycle(engine, production=False, seed_dev_users=False)
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.identity_strategy = original_strategy
    app.state.schema_lifecycle = original_lifecycle


def act_as(user_id: int) -> None:
    """Make subsequent requests resolve to ``user_id``."""
    app.state.identity_strategy = DevelopmentOverrideStrategy(override_user_id=user_id)
