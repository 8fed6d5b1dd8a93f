"""Pydantic schemas for API validation."""

from minedine.schemas.booking import (
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingResponse,
    SelectedAddOn,
)
from minedine.schemas.moderation import (
    AddOnCreate,
    AddOnResponse,
    AddOnUpdate,
    DecisionRequest,
    DinnerModerationResponse,
    HostApplicationResponse,
    ModeratorStatsResponse,
    RevenueListResponse,
    RevenueShareResponse,
)
from minedine.schemas.review import (
    GuestReputationResponse,
    GuestReviewCreate,
    GuestReviewResponse,
    ReviewCreate,
    ReviewResponse,
    TipIntentCreate,
    TipIntentResponse,
)

__all__ = [
    "AddOnCreate",
    "AddOnResponse",
    "AddOnUpdate",
    "BookingCreate",
    "BookingCreateResponse",
    "BookingListResponse",
    "BookingResponse",
    "DecisionRequest",
    "DinnerModerationResponse",
    "GuestReputationResponse",
    "GuestReviewCreate",
    "GuestReviewResponse",
    "HostApplicationResponse",
    "ModeratorStatsResponse",
    "RevenueListResponse",
    "RevenueShareResponse",
    "ReviewCreate",
    "ReviewResponse",
    "SelectedAddOn",
    "TipIntentCreate",
    "TipIntentResponse",
]
