"""Initial migration: users table.

Revision ID: 001
Revises: None
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
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("department", sa.String(255), nullable=False, server_default=""),
        sa.Column("college", sa.String(255), nullable=False, server_default=""),
        # NULL roll numbers never collide under a unique constraint
        sa.Column("rollno", sa.String(100), nullable=True),
        sa.Column("mobile_no", sa.String(32), nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("user_last_login", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("rollno", name="uq_users_rollno"),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_user_id", table_name="users")
    op.drop_table("users")
