"""Moderator revenue-share model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from minedine.database import Base

if TYPE_CHECKING:
    from minedine.models.booking import Booking
    from minedine.models.user import User


class RevenueShare(Base):
    """Payout owed to a moderator for one booking."""

    __tablename__ = "revenue_shares"
    __table_args__ = (
        UniqueConstraint("booking_id", "share_type", name="unique_booking_share_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    moderator_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id"), nullable=False, index=True
    )
    share_type: Mapped[str] = mapped_column(String(20), nullable=False)  # ONBOARDING, REFERRAL

    # Calculation inputs, kept for audit
    base_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    booking_number: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default="PENDING", index=True
    )  # PENDING, PAID, CANCELLED

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    moderator: Mapped["User"] = relationship("User", back_populates="revenue_shares")
    booking: Mapped["Booking"] = relationship("Booking", back_populates="revenue_shares")
