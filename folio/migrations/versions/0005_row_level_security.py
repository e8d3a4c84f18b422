"""Row-level security, same-tenant junction triggers and updated_at triggers

Revision ID: 0005_row_level_security
Revises: 0004_daily_snapshots
Create Date: 2026-01-12

PostgreSQL only. Policies read the identity bound by
folio.services.session_scope.bind_session_identity from the transaction-local
setting app.user_id. Every statement is drop-if-exists / create-or-replace so
the revision can be re-applied.

Row-level security does not apply to the table owner or superusers; the
application must connect as a separate role for the policies to take effect.
"""

from collections.abc import Sequence

from alembic import op

revision: str = "0005_row_level_security"
down_revision: str | None = "0004_daily_snapshots"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

BOUND_USER = "NULLIF(current_setting('app.user_id', true), '')::int"

OWNED_BY_PORTFOLIO = """EXISTS (
    SELECT 1 FROM portfolios p
    WHERE p.id = {table}.portfolio_id
    AND p.user_id = {bound_user}
)"""

OWNED_BY_INVESTMENT = """EXISTS (
    SELECT 1 FROM investments i
    JOIN portfolios p ON p.id = i.portfolio_id
    WHERE i.id = {table}.investment_id
    AND p.user_id = {bound_user}
)"""

# Junction inserts additionally require the label owner to match the portfolio owner
SAME_TENANT_LABEL = """EXISTS (
    SELECT 1 FROM investments i
    JOIN portfolios p ON p.id = i.portfolio_id
    JOIN {label_table} l ON l.id = {table}.{label_column}
    WHERE i.id = {table}.investment_id
    AND l.user_id = p.user_id
    AND p.user_id = {bound_user}
)"""

UPDATED_AT_TABLES = ("users", "portfolios", "investments")

JUNCTIONS = (
    # (junction table, label table, label column, trigger function, label noun)
    ("investment_categories", "categories", "category_id", "enforce_same_user_inv_cat", "category"),
    ("investment_tags", "tags", "tag_id", "enforce_same_user_inv_tag", "tag"),
)


def _policies() -> dict[str, tuple[str, str]]:
    """Return {table: (USING, WITH CHECK)} for every tenant table."""
    direct = f"user_id = {BOUND_USER}"
    policies = {
        "portfolios": (direct, direct),
        "categories": (direct, direct),
        "tags": (direct, direct),
        "investment_types": (direct, direct),
        "user_daily_snapshots": (direct, direct),
    }
    for table in ("investments", "portfolio_daily_snapshots"):
        condition = OWNED_BY_PORTFOLIO.format(table=table, bound_user=BOUND_USER)
        policies[table] = (condition, condition)
    for table in ("distributions", "investment_value_history"):
        condition = OWNED_BY_INVESTMENT.format(table=table, bound_user=BOUND_USER)
        policies[table] = (condition, condition)
    for table, label_table, label_column, _, _ in JUNCTIONS:
        using = OWNED_BY_INVESTMENT.format(table=table, bound_user=BOUND_USER)
        check = SAME_TENANT_LABEL.format(
            table=table,
            label_table=label_table,
            label_column=label_column,
            bound_user=BOUND_USER,
        )
        policies[table] = (using, check)
    return policies


def upgrade() -> None:
    """Install triggers and policies."""
    if op.get_bind().dialect.name != "postgresql":
        return

    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS trigger AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
        op.execute(
            f"CREATE TRIGGER update_{table}_updated_at BEFORE UPDATE ON {table} "
            "FOR EACH ROW EXECUTE PROCEDURE update_updated_at_column()"
        )

    for table, (using, check) in _policies().items():
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"DROP POLICY IF EXISTS {table}_rw ON {table}")
        op.execute(f"CREATE POLICY {table}_rw ON {table} USING ({using}) WITH CHECK ({check})")

    for table, label_table, label_column, function, noun in JUNCTIONS:
        op.execute(f"""
            CREATE OR REPLACE FUNCTION {function}()
            RETURNS trigger AS $$
            DECLARE
                inv_user INT;
                label_user INT;
            BEGIN
                SELECT p.user_id INTO inv_user
                FROM investments i
                JOIN portfolios p ON p.id = i.portfolio_id
                WHERE i.id = NEW.investment_id;

                SELECT user_id INTO label_user
                FROM {label_table}
                WHERE id = NEW.{label_column};

                IF inv_user IS NULL OR label_user IS NULL OR inv_user <> label_user THEN
                    RAISE EXCEPTION 'Cross-tenant association not allowed: investment and {noun} must belong to the same user';
                END IF;

                RETURN NEW;
            END;
            $$ LANGUAGE plpgsql;
        """)
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_same_user ON {table}")
        op.execute(
            f"CREATE TRIGGER trg_{table}_same_user BEFORE INSERT OR UPDATE ON {table} "
            f"FOR EACH ROW EXECUTE PROCEDURE {function}()"
        )


def downgrade() -> None:
    """Remove triggers and policies."""
    if op.get_bind().dialect.name != "postgresql":
        return

    for table, _, _, function, _ in JUNCTIONS:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_same_user ON {table}")
        op.execute(f"DROP FUNCTION IF EXISTS {function}()")
    for table in _policies():
        op.execute(f"DROP POLICY IF EXISTS {table}_rw ON {table}")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
