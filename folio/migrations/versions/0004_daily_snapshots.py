"""Add daily snapshot tables for historical value tracking

Revision ID: 0004_daily_snapshots
Revises: 0003_stock_fields
Create Date: 2025-12-08

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0004_daily_snapshots"
down_revision: str | None = "0003_stock_fields"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _aggregate_columns() -> list[sa.Column]:
    return [
        sa.Column("total_value", sa.Numeric(18, 2), nullable=False),
        sa.Column("total_invested", sa.Numeric(18, 2), nullable=False),
        sa.Column("total_distributions", sa.Numeric(18, 2), nullable=False),
    ]


def upgrade() -> None:
    """Create snapshot tables and indexes that do not exist yet."""
    inspector = sa.inspect(op.get_bind())

    if not inspector.has_table("portfolio_daily_snapshots"):
        op.create_table(
            "portfolio_daily_snapshots",
            sa.Column(
                "portfolio_id",
                sa.Integer(),
                sa.ForeignKey("portfolios.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column("snapshot_date", sa.Date(), primary_key=True),
            *_aggregate_columns(),
            sa.Column("investment_count", sa.Integer(), server_default="0", nullable=False),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    if not inspector.has_table("user_daily_snapshots"):
        op.create_table(
            "user_daily_snapshots",
            sa.Column(
                "user_id",
                sa.Integer(),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column("snapshot_date", sa.Date(), primary_key=True),
            *_aggregate_columns(),
            sa.Column("portfolio_count", sa.Integer(), server_default="0", nullable=False),
            sa.Column("investment_count", sa.Integer(), server_default="0", nullable=False),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    if not inspector.has_table("investment_value_history"):
        op.create_table(
            "investment_value_history",
            sa.Column(
                "investment_id",
                sa.Integer(),
                sa.ForeignKey("investments.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column("snapshot_date", sa.Date(), primary_key=True),
            sa.Column("stock_price", sa.Numeric(18, 8)),
            sa.Column("stock_quantity", sa.Numeric(18, 8)),
            sa.Column("value", sa.Numeric(18, 2), nullable=False),
            sa.Column("total_distributions", sa.Numeric(18, 2), server_default="0", nullable=False),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        )

    op.create_index(
        "idx_portfolio_snapshots_date",
        "portfolio_daily_snapshots",
        ["snapshot_date"],
        if_not_exists=True,
    )
    op.create_index(
        "idx_portfolio_snapshots_portfolio",
        "portfolio_daily_snapshots",
        ["portfolio_id", "snapshot_date"],
        if_not_exists=True,
    )
    op.create_index(
        "idx_user_snapshots_date", "user_daily_snapshots", ["snapshot_date"], if_not_exists=True
    )
    op.create_index(
        "idx_user_snapshots_user",
        "user_daily_snapshots",
        ["user_id", "snapshot_date"],
        if_not_exists=True,
    )
    op.create_index(
        "idx_investment_history_date",
        "investment_value_history",
        ["snapshot_date"],
        if_not_exists=True,
    )
    op.create_index(
        "idx_investment_history_investment",
        "investment_value_history",
        ["investment_id", "snapshot_date"],
        if_not_exists=True,
    )


def downgrade() -> None:
    """Drop snapshot tables."""
    op.drop_table("investment_value_history")
    op.drop_table("user_daily_snapshots")
    op.drop_table("portfolio_daily_snapshots")
