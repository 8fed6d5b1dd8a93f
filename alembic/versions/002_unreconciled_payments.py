"""Track payments that arrive for cancelled bookings.

Revision ID: 002_unreconciled_payments
Revises: 001_initial
Create Date: 2026-10-20
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "002_unreconciled_payments"
down_revision: str | None = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column(
        "bookings",
        sa.Column("unreconciled_payment_intent_id", sa.String(100), nullable=True),
    )
    op.create_index(
        "ix_bookings_unreconciled_payment_intent_id",
        "bookings",
        ["unreconciled_payment_intent_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_bookings_unreconciled_payment_intent_id", table_name="bookings")
    op.drop_column("bookings", "unreconciled_payment_intent_id")
