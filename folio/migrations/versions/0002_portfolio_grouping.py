"""Introduce portfolios between users and investments

Revision ID: 0002_portfolio_grouping
Revises: 0001_flat_schema
Create Date: 2025-10-14

This data migration:
1. Creates the portfolios table
2. Creates a default portfolio for every user that owns legacy investments
3. Adds investments.portfolio_id and points legacy investments at the default portfolio
4. Relaxes investments.user_id to nullable (kept for backfill only)

Each step checks current state first, so the revision is safe to re-run.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy import text

from alembic import op

revision: str = "0002_portfolio_grouping"
down_revision: str | None = "0001_flat_schema"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_PORTFOLIO_NAME = "My Portfolio"
DEFAULT_PORTFOLIO_DESCRIPTION = "Default portfolio"


def _investment_columns(conn: sa.Connection) -> dict[str, dict]:
    # Fresh inspector each time: reflection results are cached per inspector
    return {column["name"]: column for column in sa.inspect(conn).get_columns("investments")}


def upgrade() -> None:
    """Move investments under a per-user default portfolio."""
    conn = op.get_bind()

    if not sa.inspect(conn).has_table("portfolios"):
        op.create_table(
            "portfolios",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "user_id",
                sa.Integer(),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("description", sa.Text()),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint("user_id", "name", name="uq_portfolios_user_name"),
        )
    op.create_index("idx_portfolios_user_id", "portfolios", ["user_id"], if_not_exists=True)

    # One default portfolio per distinct legacy owner
    conn.execute(
        text("""
            INSERT INTO portfolios (user_id, name, description)
            SELECT DISTINCT i.user_id, :name, :description
            FROM investments i
            WHERE i.user_id IS NOT NULL
              AND NOT EXISTS (
                  SELECT 1 FROM portfolios p
                  WHERE p.user_id = i.user_id AND p.name = :name
              )
        """),
        {"name": DEFAULT_PORTFOLIO_NAME, "description": DEFAULT_PORTFOLIO_DESCRIPTION},
    )

    if "portfolio_id" not in _investment_columns(conn):
        # Plain ALTER: both PostgreSQL and SQLite accept an inline REFERENCES on a nullable column
        op.execute(
            "ALTER TABLE investments "
            "ADD COLUMN portfolio_id INTEGER REFERENCES portfolios(id) ON DELETE CASCADE"
        )
    op.create_index(
        "idx_investments_portfolio_id", "investments", ["portfolio_id"], if_not_exists=True
    )

    conn.execute(
        text("""
            UPDATE investments
            SET portfolio_id = (
                SELECT p.id FROM portfolios p
                WHERE p.user_id = investments.user_id AND p.name = :name
            )
            WHERE portfolio_id IS NULL AND user_id IS NOT NULL
        """),
        {"name": DEFAULT_PORTFOLIO_NAME},
    )

    if not _investment_columns(conn)["user_id"]["nullable"]:
        with op.batch_alter_table("investments") as batch_op:
            batch_op.alter_column("user_id", existing_type=sa.Integer(), nullable=True)


def downgrade() -> None:
    """Drop the portfolio level. Investments without a legacy owner are lost."""
    op.execute("DELETE FROM investments WHERE user_id IS NULL")
    op.drop_index("idx_investments_portfolio_id", table_name="investments", if_exists=True)
    with op.batch_alter_table("investments") as batch_op:
        batch_op.drop_column("portfolio_id")
        batch_op.alter_column("user_id", existing_type=sa.Integer(), nullable=False)
    op.drop_table("portfolios")
