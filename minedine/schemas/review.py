"""Review-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    """Schema for creating a dinner review.

    Star totals are checked by the star-budget validator, not here, so the
    error names the budget that was missed.
    """

    booking_id: UUID
    hospitality_stars: int
    cleanliness_stars: int
    taste_stars: int
    tip_stars: int = 0
    tip_payment_intent_id: str | None = Field(None, max_length=100)
    comment: str | None = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    """Schema for review response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    user_id: UUID
    dinner_id: UUID
    hospitality_stars: int
    cleanliness_stars: int
    taste_stars: int
    tip_stars: int
    tip_amount: Decimal
    comment: str | None
    created_at: datetime


class TipIntentCreate(BaseModel):
    """Schema for requesting a tip payment."""

    booking_id: UUID
    tip_stars: int = Field(..., ge=1, le=10)


class TipIntentResponse(BaseModel):
    client_secret: str | None
    payment_intent_id: str
    tip_amount: Decimal
    star_cost: Decimal
    tip_stars: int


class GuestReviewCreate(BaseModel):
    """Schema for a host's review of a guest."""

    booking_id: UUID
    sentiment: Literal["LIKE", "DISLIKE"]


class GuestReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    host_id: UUID
    guest_id: UUID
    dinner_id: UUID
    sentiment: str
    created_at: datetime


class GuestReputationResponse(BaseModel):
    guest_id: UUID
    likes: int
    dislikes: int
    total: int
    like_percentage: int
