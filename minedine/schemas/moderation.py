"""Moderator, revenue-share and add-on schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DecisionRequest(BaseModel):
    decision: Literal["APPROVE", "REJECT"]
    note: str | None = Field(None, max_length=1000)


class HostApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    status: str
    rejection_reason: str | None
    reviewed_by_id: UUID | None
    reviewed_at: datetime | None
    onboarded_by_id: UUID | None


class DinnerModerationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    status: str
    moderation_status: str


class RevenueShareResponse(BaseModel):
    """Schema for a single revenue share."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    share_type: str
    base_percentage: Decimal
    booking_number: int
    actual_percentage: Decimal
    amount: Decimal
    status: str
    created_at: datetime


class RevenueTotals(BaseModel):
    total_pending: Decimal
    total_paid: Decimal
    total_cancelled: Decimal
    total_amount: Decimal
    onboarding_total: Decimal
    referral_total: Decimal


class RevenueListResponse(BaseModel):
    revenue_shares: list[RevenueShareResponse]
    totals: RevenueTotals


class ModeratorStatsResponse(BaseModel):
    referral_code: str | None
    hosts_onboarded: int
    total_onboarding_bookings: int
    total_referral_bookings: int
    revenue: RevenueTotals


class AddOnCreate(BaseModel):
    """Schema for adding a priced extra to a dinner."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class AddOnUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class AddOnResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    dinner_id: UUID
    name: str
    description: str | None
    price: Decimal
