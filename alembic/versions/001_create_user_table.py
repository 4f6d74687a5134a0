"""Create user table

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("verification_token", sa.String(length=6), nullable=True),
        sa.Column("verification_token_expires_at", sa.DateTime(), nullable=True),
        sa.Column("reset_password_token", sa.String(length=64), nullable=True),
        sa.Column("reset_password_expires_at", sa.DateTime(), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)
    op.create_index(op.f("ix_user_verification_token"), "user", ["verification_token"], unique=False)
    op.create_index(op.f("ix_user_reset_password_token"), "user", ["reset_password_token"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_reset_password_token"), table_name="user")
    op.drop_index(op.f("ix_user_verification_token"), table_name="user")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")
