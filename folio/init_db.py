"""Database initialization script.

Brings the schema up to date through the schema lifecycle manager (ordered
Alembic revisions) and, outside production, seeds the development users.

Usage:
    python -m folio.init_db
    python -m folio.init_db --no-seed
"""

import argparse
import logging
import sys

from folio.config import settings
from folio.database import engine
from folio.services.schema_lifecycle import (
    SchemaInitializationError,
    SchemaLifecycle,
    SchemaState,
)
from folio.services.session_scope import StorageUnavailableError

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize the Folio database schema")
    parser.add_argument(
        "--no-seed", action="store_true", help="Do not insert the development fixture users"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run schema initialization. Returns a process exit code."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    lifecycle = SchemaLifecycle(
        engine,
        production=settings.is_production,
        seed_dev_users=settings.seed_dev_users and not args.no_seed,
    )
    try:
        state = lifecycle.ensure()
    except (StorageUnavailableError, SchemaInitializationError) as e:
        logger.error(f"Database initialization failed: {e}")
        return 1

    if state is SchemaState.SKIPPED:
        print("Production deployment: run `alembic upgrade head` to provision the schema.")
    else:
        print("Database initialized successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
