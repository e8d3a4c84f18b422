"""Add stock tracking fields and non-negative constraints to investments

Revision ID: 0003_stock_fields
Revises: 0002_portfolio_grouping
Create Date: 2025-11-03

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0003_stock_fields"
down_revision: str | None = "0002_portfolio_grouping"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _stock_columns() -> list[sa.Column]:
    return [
        sa.Column("has_distributions", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("stock_symbol", sa.String(20)),
        sa.Column("stock_quantity", sa.Numeric(18, 8)),
        sa.Column("current_stock_price", sa.Numeric(18, 8)),
        sa.Column("stock_price_updated_at", sa.DateTime()),
    ]


# (table, constraint name, condition). PostgreSQL only: SQLite cannot add
# constraints to an existing table.
CHECK_CONSTRAINTS = (
    ("distributions", "chk_distributions_amount_nonneg", "amount >= 0"),
    ("investments", "chk_investments_qty_nonneg", "stock_quantity IS NULL OR stock_quantity >= 0"),
    (
        "investments",
        "chk_investments_price_nonneg",
        "current_stock_price IS NULL OR current_stock_price >= 0",
    ),
)


def upgrade() -> None:
    """Add stock columns and constraints that are missing."""
    conn = op.get_bind()
    existing = {column["name"] for column in sa.inspect(conn).get_columns("investments")}

    for column in _stock_columns():
        if column.name not in existing:
            op.add_column("investments", column)

    if conn.dialect.name != "postgresql":
        return

    for table_name, constraint_name, condition in CHECK_CONSTRAINTS:
        op.execute(f"""
            DO $$
            BEGIN
                ALTER TABLE {table_name}
                ADD CONSTRAINT {constraint_name} CHECK ({condition});
            EXCEPTION
                WHEN duplicate_object THEN NULL;
            END $$;
        """)


def downgrade() -> None:
    """Remove stock columns."""
    if op.get_bind().dialect.name == "postgresql":
        op.drop_constraint("chk_investments_price_nonneg", "investments", type_="check")
        op.drop_constraint("chk_investments_qty_nonneg", "investments", type_="check")
    with op.batch_alter_table("investments") as batch_op:
        for column in reversed(_stock_columns()):
            batch_op.drop_column(column.name)
