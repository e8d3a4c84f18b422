"""Schema lifecycle manager.

Makes sure the schema exists before the first tenant operation of the process:
applies pending Alembic revisions (recorded in the ``alembic_version`` ledger)
and seeds development fixture users. Production deployments are migrated out
of band and are never touched.

The state flag is process-local and unsynchronized. Two concurrent first
requests may both run the upgrade; every revision is idempotent
(create-if-absent, guarded column adds, insert-where-not-exists backfills),
so that is safe, and a failed run simply leaves the flag unset for a retry.
"""

import logging
from enum import Enum
from pathlib import Path

from sqlalchemy import Engine, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, OperationalError

from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from folio.constants import DEFAULT_PORTFOLIO_NAME, SESSION_USER_SETTING
from folio.services.session_scope import StorageUnavailableError

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

# Fixture users created in development databases
DEV_FIXTURE_USERS = [
    {"id": 1, "name": "John Doe", "email": "john@example.com"},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com"},
    {"id": 3, "name": "Bob Johnson", "email": "bob@example.com"},
]

# First id handed out after the fixtures
USER_ID_SEQUENCE_START = 10


class SchemaInitializationError(Exception):
    """A migration or seeding step failed."""


class SchemaState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    SKIPPED = "skipped"


def alembic_config() -> Config:
    """Alembic configuration pointing at the bundled migrations."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    return config


class SchemaLifecycle:
    """Runs schema setup at most once per process (per instance).

    Held on ``app.state`` so tests can build their own and call ``reset``.
    """

    def __init__(self, engine: Engine, *, production: bool, seed_dev_users: bool = True) -> None:
        self.engine = engine
        self.production = production
        self.seed_dev_users = seed_dev_users
        self.state = SchemaState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state is not SchemaState.UNINITIALIZED

    def ensure(self) -> SchemaState:
        """Bring the schema up to date if this has not happened yet.

        Raises:
            StorageUnavailableError: If the database cannot be reached.
            SchemaInitializationError: If a migration or seeding step fails.
        """
        if self.is_ready:
            return self.state

        if self.production:
            logger.warning(
                "Production deployment: skipping schema initialization "
                "(schema must be provisioned with `alembic upgrade head`)"
            )
            self.state = SchemaState.SKIPPED
            return self.state

        logger.info("Initializing database schema...")
        try:
            with self.engine.begin() as connection:
                config = alembic_config()
                config.attributes["connection"] = connection
                command.upgrade(config, "head")
                if self.seed_dev_users:
                    seed_fixture_users(connection)
        except OperationalError as e:
            logger.error(f"Database unavailable during schema initialization: {e}")
            raise StorageUnavailableError("Database connection failed") from e
        except (DBAPIError, CommandError) as e:
            logger.error(f"Schema initialization failed: {e}")
            raise SchemaInitializationError(str(e)) from e

        self.state = SchemaState.INITIALIZED
        logger.info("Database schema initialized")
        return self.state

    def reset(self) -> None:
        """Forget the initialization result so the next ``ensure`` runs again."""
        self.state = SchemaState.UNINITIALIZED


def seed_fixture_users(connection: Connection) -> int:
    """Insert the development fixture users and their default portfolios.

    Existing rows (matched by email and by portfolio name) are left untouched.

    Returns:
        Number of users inserted
    """
    inserted = 0
    for user in DEV_FIXTURE_USERS:
        existing = connection.execute(
            text("SELECT id FROM users WHERE email = :email"), {"email": user["email"]}
        ).first()
        if existing is None:
            connection.execute(
                text("INSERT INTO users (id, name, email) VALUES (:id, :name, :email)"), user
            )
            inserted += 1
            user_id = user["id"]
        else:
            user_id = existing[0]

        if connection.dialect.name == "postgresql":
            # Portfolio rows are subject to row-level security
            connection.execute(
                text("SELECT set_config(:name, :value, true)"),
                {"name": SESSION_USER_SETTING, "value": str(user_id)},
            )
        connection.execute(
            text("""
                INSERT INTO portfolios (user_id, name, description)
                SELECT :user_id, :name, 'Default portfolio'
                WHERE NOT EXISTS (
                    SELECT 1 FROM portfolios WHERE user_id = :user_id AND name = :name
                )
            """),
            {"user_id": user_id, "name": DEFAULT_PORTFOLIO_NAME},
        )

    if connection.dialect.name == "postgresql":
        connection.execute(
            text("""
                SELECT setval('users_id_seq', GREATEST(:start - 1, (SELECT MAX(id) FROM users)))
            """),
            {"start": USER_ID_SEQUENCE_START},
        )

    if inserted:
        logger.info(f"Seeded {inserted} development users")
    return inserted
