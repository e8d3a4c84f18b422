"""Flat schema: users, labels, investments owned directly by users

Revision ID: 0001_flat_schema
Revises:
Create Date: 2025-09-02

The original layout, before portfolios existed. Deployments created before
the migration ledger was introduced already have these tables, so every
table is created only if absent and this revision is a no-op for them.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0001_flat_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _label_table(name: str, name_length: int) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(name_length), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name=f"uq_{name}_user_name"),
    )


def upgrade() -> None:
    """Create the flat schema tables that do not exist yet."""
    inspector = sa.inspect(op.get_bind())

    if not inspector.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("email", sa.String(255), nullable=False, unique=True),
            sa.Column("name", sa.String(255), nullable=False),
            *_timestamps(),
        )

    for table_name, name_length in (("categories", 100), ("tags", 50), ("investment_types", 100)):
        if not inspector.has_table(table_name):
            _label_table(table_name, name_length)

    if not inspector.has_table("investments"):
        op.create_table(
            "investments",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "user_id",
                sa.Integer(),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("description", sa.Text()),
            sa.Column("date_started", sa.Date()),
            sa.Column("amount", sa.Numeric(12, 2), nullable=False),
            sa.Column("investment_type", sa.String(100), nullable=False),
            *_timestamps(),
            sa.CheckConstraint("amount >= 0", name="chk_investments_amount_nonneg"),
        )

    if not inspector.has_table("distributions"):
        op.create_table(
            "distributions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "investment_id",
                sa.Integer(),
                sa.ForeignKey("investments.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("amount", sa.Numeric(12, 2), nullable=False),
            sa.Column("description", sa.Text()),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.CheckConstraint("amount >= 0", name="chk_distributions_amount_nonneg"),
        )

    for junction, label_table, label_column in (
        ("investment_categories", "categories", "category_id"),
        ("investment_tags", "tags", "tag_id"),
    ):
        if not inspector.has_table(junction):
            op.create_table(
                junction,
                sa.Column(
                    "investment_id",
                    sa.Integer(),
                    sa.ForeignKey("investments.id", ondelete="CASCADE"),
                    primary_key=True,
                ),
                sa.Column(
                    label_column,
                    sa.Integer(),
                    sa.ForeignKey(f"{label_table}.id", ondelete="CASCADE"),
                    primary_key=True,
                ),
            )

    op.create_index("idx_categories_user_id", "categories", ["user_id"], if_not_exists=True)
    op.create_index("idx_tags_user_id", "tags", ["user_id"], if_not_exists=True)
    op.create_index(
        "idx_investment_types_user_id", "investment_types", ["user_id"], if_not_exists=True
    )
    op.create_index("idx_investments_user_id", "investments", ["user_id"], if_not_exists=True)
    op.create_index(
        "idx_distributions_investment_id", "distributions", ["investment_id"], if_not_exists=True
    )
    op.create_index("idx_distributions_date", "distributions", ["date"], if_not_exists=True)


def downgrade() -> None:
    """Drop the flat schema."""
    op.drop_table("investment_tags")
    op.drop_table("investment_categories")
    op.drop_table("distributions")
    op.drop_table("investments")
    op.drop_table("investment_types")
    op.drop_table("tags")
    op.drop_table("categories")
    op.drop_table("users")
