"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from minedine.database import Base

if TYPE_CHECKING:
    from minedine.models.dinner import Dinner
    from minedine.models.revenue import RevenueShare
    from minedine.models.review import GuestReview, Review
    from minedine.models.user import User


class Booking(Base):
    """A guest's reservation for a dinner."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    dinner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("dinners.id"), nullable=False, index=True
    )

    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False)

    # Pricing (EUR), fixed at creation
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    add_ons_total: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Snapshot: [{"add_on_id", "name", "unit_price", "quantity"}]
    selected_add_ons: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), default=list
    )

    # Referral attribution
    referral_code_used: Mapped[str | None] = mapped_column(String(20), index=True)
    referral_moderator_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="PENDING", index=True
    )  # PENDING, CONFIRMED, CANCELLED, COMPLETED
    stripe_payment_intent_id: Mapped[str | None] = mapped_column(String(100), index=True)
    # Payment that arrived after the booking was cancelled; needs a manual refund
    unreconciled_payment_intent_id: Mapped[str | None] = mapped_column(String(100), index=True)

    # Timestamps
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="bookings", foreign_keys=[user_id])
    referral_moderator: Mapped["User | None"] = relationship(
        "User", foreign_keys=[referral_moderator_id]
    )
    dinner: Mapped["Dinner"] = relationship("Dinner", back_populates="bookings")
    review: Mapped["Review | None"] = relationship(
        "Review", back_populates="booking", uselist=False
    )
    guest_review: Mapped["GuestReview | None"] = relationship(
        "GuestReview", back_populates="booking", uselist=False
    )
    revenue_shares: Mapped[list["RevenueShare"]] = relationship(
        "RevenueShare", back_populates="booking"
    )
