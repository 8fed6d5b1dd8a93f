"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all initial tables for Mine Dine:
- Users and host applications
- Dinners and add-ons
- Bookings
- Reviews and guest reviews
- Moderator revenue shares
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(100)),
        sa.Column("role", sa.String(20), nullable=False, server_default="GUEST"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("referral_code", sa.String(20), unique=True, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "host_applications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("application_text", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), server_default="PENDING", index=True),
        sa.Column("rejection_reason", sa.Text),
        sa.Column("reviewed_by_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id")),
        sa.Column("reviewed_at", sa.DateTime(timezone=True)),
        sa.Column("onboarded_by_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== DINNERS ====================
    op.create_table(
        "dinners",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("location", sa.String(200)),
        sa.Column("date_time", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("max_guests", sa.Integer, nullable=False),
        sa.Column("base_price_per_person", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), server_default="DRAFT", index=True),
        sa.Column("moderation_status", sa.String(20), server_default="PENDING"),
        sa.Column("visibility", sa.String(10), server_default="PUBLIC"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "dinner_add_ons",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("dinner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("dinners.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("dinner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("dinners.id"), nullable=False, index=True),
        sa.Column("number_of_guests", sa.Integer, nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("add_ons_total", sa.Numeric(10, 2), server_default="0"),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("selected_add_ons", postgresql.JSONB, server_default="[]"),
        sa.Column("referral_code_used", sa.String(20), index=True),
        sa.Column("referral_moderator_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), index=True),
        sa.Column("status", sa.String(20), server_default="PENDING", index=True),
        sa.Column("stripe_payment_intent_id", sa.String(100), index=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== REVIEWS ====================
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), unique=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("dinner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("dinners.id"), nullable=False, index=True),
        sa.Column("hospitality_stars", sa.Integer, nullable=False),
        sa.Column("cleanliness_stars", sa.Integer, nullable=False),
        sa.Column("taste_stars", sa.Integer, nullable=False),
        sa.Column("tip_stars", sa.Integer, server_default="0"),
        sa.Column("tip_amount", sa.Numeric(10, 2), server_default="0"),
        sa.Column("tip_payment_intent_id", sa.String(100), unique=True),
        sa.Column("comment", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "hospitality_stars + cleanliness_stars + taste_stars = 5 + tip_stars",
            name="check_review_star_budget",
        ),
        sa.CheckConstraint("tip_stars BETWEEN 0 AND 10", name="check_review_tip_stars"),
    )

    op.create_table(
        "guest_reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), unique=True, nullable=False),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("guest_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("dinner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("dinners.id"), nullable=False),
        sa.Column("sentiment", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== REVENUE SHARES ====================
    op.create_table(
        "revenue_shares",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("moderator_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), nullable=False, index=True),
        sa.Column("share_type", sa.String(20), nullable=False),
        sa.Column("base_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("booking_number", sa.Integer, nullable=False),
        sa.Column("actual_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), server_default="PENDING", index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("booking_id", "share_type", name="unique_booking_share_type"),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("revenue_shares")
    op.drop_table("guest_reviews")
    op.drop_table("reviews")
    op.drop_table("bookings")
    op.drop_table("dinner_add_ons")
    op.drop_table("dinners")
    op.drop_table("host_applications")
    op.drop_table("users")
