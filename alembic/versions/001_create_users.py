"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            username        VARCHAR(16)     PRIMARY KEY,
            password_hash   VARCHAR(255)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_users_username_format CHECK (username ~ '^[A-Za-z0-9_]{4,16}$')
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Login credentials, bcrypt hashes only';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
