"""003: create transactions table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # transaction_id is generated by the application (uuid4)
    op.execute("""
        CREATE TABLE transactions (
            transaction_id  UUID            PRIMARY KEY,
            from_user       VARCHAR(16)     NOT NULL REFERENCES accounts (username),
            to_user         VARCHAR(16)     NOT NULL REFERENCES accounts (username),
            amount          BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_transactions_distinct_users CHECK (from_user <> to_user)
        );
    """)
    op.execute(
        "CREATE INDEX idx_transactions_from_user ON transactions (from_user, created_at DESC);"
    )
    op.execute(
        "CREATE INDEX idx_transactions_to_user ON transactions (to_user, created_at DESC);"
    )
    op.execute("COMMENT ON TABLE transactions IS 'Transfer history, append-only';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
