"""User-related database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from minedine.database import Base

if TYPE_CHECKING:
    from minedine.models.booking import Booking
    from minedine.models.dinner import Dinner
    from minedine.models.revenue import RevenueShare


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="GUEST"
    )  # GUEST, HOST, MODERATOR, ADMIN
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Moderators only, MOD-XXXX
    referral_code: Mapped[str | None] = mapped_column(String(20), unique=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    dinners: Mapped[list["Dinner"]] = relationship("Dinner", back_populates="host")
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="user", foreign_keys="[Booking.user_id]"
    )
    host_application: Mapped["HostApplication | None"] = relationship(
        "HostApplication",
        back_populates="user",
        uselist=False,
        foreign_keys="[HostApplication.user_id]",
    )
    revenue_shares: Mapped[list["RevenueShare"]] = relationship(
        "RevenueShare", back_populates="moderator"
    )

    @property
    def is_moderator(self) -> bool:
        """Moderators and admins can moderate."""
        return self.role in ("MODERATOR", "ADMIN")


class HostApplication(Base):
    """A user's request to become a host."""

    __tablename__ = "host_applications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    application_text: Mapped[str] = mapped_column(Text, nullable=False)

    # Status: PENDING, APPROVED, REJECTED
    status: Mapped[str] = mapped_column(String(20), default="PENDING", index=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text)
    reviewed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id")
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Moderator who approved the host; earns ONBOARDING revenue shares
    onboarded_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="host_application", foreign_keys=[user_id]
    )
    onboarded_by: Mapped["User | None"] = relationship("User", foreign_keys=[onboarded_by_id])
