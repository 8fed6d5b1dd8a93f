"""Booking-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SelectedAddOn(BaseModel):
    """An add-on requested with a booking."""

    add_on_id: UUID
    quantity: int = Field(default=1, ge=1, le=100)


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    dinner_id: UUID
    number_of_guests: int = Field(..., ge=1, le=100)
    selected_add_ons: list[SelectedAddOn] = Field(default_factory=list)
    referral_code: str | None = Field(None, max_length=20)

    @field_validator("referral_code")
    @classmethod
    def blank_code_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("selected_add_ons")
    @classmethod
    def unique_add_ons(cls, v: list[SelectedAddOn]) -> list[SelectedAddOn]:
        ids = [item.add_on_id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each add-on can only be selected once")
        return v


class BookingAddOnLine(BaseModel):
    """Add-on snapshot stored on the booking."""

    add_on_id: UUID
    name: str
    unit_price: Decimal
    quantity: int


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    dinner_id: UUID
    number_of_guests: int

    # Pricing
    base_price: Decimal
    add_ons_total: Decimal
    total_price: Decimal
    selected_add_ons: list[BookingAddOnLine]

    referral_code_used: str | None
    status: str
    stripe_payment_intent_id: str | None
    unreconciled_payment_intent_id: str | None

    # Timestamps
    confirmed_at: datetime | None
    cancelled_at: datetime | None
    completed_at: datetime | None
    created_at: datetime


class BookingCreateResponse(BaseModel):
    """Created booking plus what the client needs to complete payment."""

    booking: BookingResponse
    client_secret: str | None
    payment_intent_id: str | None


class BookingListResponse(BaseModel):
    """Schema for booking list response."""

    bookings: list[BookingResponse]
    total: int
