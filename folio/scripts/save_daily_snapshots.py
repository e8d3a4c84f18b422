"""Save daily snapshots for every user.

Meant to run once a day from cron or a scheduler. Re-running for the same
date overwrites that day's rows.

Usage:
    python -m folio.scripts.save_daily_snapshots
    python -m folio.scripts.save_daily_snapshots --date 2026-01-31
"""

import argparse
import logging
import sys
from datetime import date

from folio.config import settings
from folio.database import SessionLocal
from folio.services.snapshot_service import save_all_snapshots

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Save daily portfolio and user snapshots")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Snapshot date (YYYY-MM-DD). Defaults to today",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, session_factory=SessionLocal) -> int:
    """Save snapshots. Exit code 1 if any user failed."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db = session_factory()
    try:
        stats = save_all_snapshots(db, args.date)
    finally:
        db.close()

    print(
        f"Saved snapshots for {stats['users_saved']} users "
        f"({stats['portfolios_saved']} portfolios) on {stats['snapshot_date']}"
    )
    if stats["failed_users"]:
        print(f"Failed users: {stats['failed_users']}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
