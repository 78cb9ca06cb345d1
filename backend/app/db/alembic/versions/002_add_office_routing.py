"""Add office routing and record metadata columns

Revision ID: 002
Revises: 001
Create Date: 2025-04-18

Requests are now routed to an office by record type. Adds:
- record_type, office_code, office_name
- record_title, record_author, record_recipient
- requester_phone, requester_email

Existing rows get office_code / office_name from agency / agency_name.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_METADATA_COLUMNS = (
    "record_type",
    "record_title",
    "record_author",
    "record_recipient",
    "requester_phone",
    "requester_email",
)


def upgrade() -> None:
    """Add columns and backfill office routing."""
    with op.batch_alter_table("requests") as batch_op:
        for column in _METADATA_COLUMNS:
            batch_op.add_column(sa.Column(column, sa.Text(), nullable=True))
        batch_op.add_column(sa.Column("office_code", sa.Text(), nullable=True))
        batch_op.add_column(sa.Column("office_name", sa.Text(), nullable=True))

    op.execute(
        "UPDATE requests SET "
        "office_code = COALESCE(agency, 'GENERAL'), "
        "office_name = COALESCE(agency_name, agency, 'VA General FOIA Help') "
        "WHERE office_code IS NULL"
    )

    with op.batch_alter_table("requests") as batch_op:
        batch_op.alter_column("office_code", existing_type=sa.Text(), nullable=False)
        batch_op.alter_column("office_name", existing_type=sa.Text(), nullable=False)


def downgrade() -> None:
    """Drop office routing and metadata columns."""
    with op.batch_alter_table("requests") as batch_op:
        batch_op.drop_column("office_name")
        batch_op.drop_column("office_code")
        for column in reversed(_METADATA_COLUMNS):
            batch_op.drop_column(column)
