"""Dinner listing models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from minedine.database import Base

if TYPE_CHECKING:
    from minedine.models.booking import Booking
    from minedine.models.user import User


class Dinner(Base):
    """A host's bookable dinner."""

    __tablename__ = "dinners"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    host_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(200))
    date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    # Capacity & pricing (EUR)
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    base_price_per_person: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="DRAFT", index=True
    )  # DRAFT, PUBLISHED, CANCELLED, COMPLETED
    moderation_status: Mapped[str] = mapped_column(
        String(20), default="PENDING"
    )  # PENDING, APPROVED, REJECTED
    visibility: Mapped[str] = mapped_column(String(10), default="PUBLIC")  # PUBLIC, PRIVATE

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    host: Mapped["User"] = relationship("User", back_populates="dinners")
    add_ons: Mapped[list["DinnerAddOn"]] = relationship(
        "DinnerAddOn", back_populates="dinner", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="dinner")


class DinnerAddOn(Base):
    """Priced extra a guest can add to a booking."""

    __tablename__ = "dinner_add_ons"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    dinner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("dinners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    dinner: Mapped["Dinner"] = relationship("Dinner", back_populates="add_ons")
