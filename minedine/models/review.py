"""Review database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from minedine.database import Base

if TYPE_CHECKING:
    from minedine.models.booking import Booking


class Review(Base):
    """Guest review of a dinner, scored with the star budget."""

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint(
            "hospitality_stars + cleanliness_stars + taste_stars = 5 + tip_stars",
            name="check_review_star_budget",
        ),
        CheckConstraint("tip_stars BETWEEN 0 AND 10", name="check_review_tip_stars"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id"), unique=True, nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    dinner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("dinners.id"), nullable=False, index=True
    )

    # Stars (0-5 each, total = 5 + tip_stars)
    hospitality_stars: Mapped[int] = mapped_column(Integer, nullable=False)
    cleanliness_stars: Mapped[int] = mapped_column(Integer, nullable=False)
    taste_stars: Mapped[int] = mapped_column(Integer, nullable=False)

    # Tip
    tip_stars: Mapped[int] = mapped_column(Integer, default=0)
    tip_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    tip_payment_intent_id: Mapped[str | None] = mapped_column(String(100), unique=True)

    comment: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="review")


class GuestReview(Base):
    """Host's sentiment about a guest after a completed dinner."""

    __tablename__ = "guest_reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id"), unique=True, nullable=False
    )
    host_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    dinner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("dinners.id"), nullable=False
    )
    sentiment: Mapped[str] = mapped_column(String(10), nullable=False)  # LIKE, DISLIKE
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="guest_review")
