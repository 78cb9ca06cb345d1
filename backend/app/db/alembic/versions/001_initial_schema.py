"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-03-02

Creates the directory-era tables:
- users
- requests (routed by agency / agency_name)
- activity_log
- documents
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("monthly_request_limit", sa.Integer(), server_default="5", nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "requests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("agency", sa.Text(), nullable=True),
        sa.Column("agency_name", sa.Text(), nullable=True),
        sa.Column("subject", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date_range_start", sa.Text(), nullable=True),
        sa.Column("date_range_end", sa.Text(), nullable=True),
        sa.Column("delivery_format", sa.Text(), server_default="either", nullable=False),
        sa.Column("request_fee_waiver", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("waiver_reason", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), server_default="pending", nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_requests_user_created", "requests", ["user_id", "created_at"])
    op.create_index("idx_requests_status", "requests", ["status"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("request_id", sa.Uuid(), nullable=False),
        sa.Column("activity_type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["request_id"], ["requests.id"]),
    )
    op.create_index("idx_activity_request_created", "activity_log", ["request_id", "created_at"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("request_id", sa.Uuid(), nullable=False),
        sa.Column("filename", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.ForeignKeyConstraint(["request_id"], ["requests.id"]),
    )
    op.create_index("idx_documents_request", "documents", ["request_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("documents")
    op.drop_table("activity_log")
    op.drop_table("requests")
    op.drop_table("users")
