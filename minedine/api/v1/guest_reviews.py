"""Host reviews of guests."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.api.deps import get_current_user, get_db
from minedine.models.review import GuestReview
from minedine.models.user import User
from minedine.schemas.review import (
    GuestReputationResponse,
    GuestReviewCreate,
    GuestReviewResponse,
)
from minedine.services.review_service import review_service

router = APIRouter()


@router.post("/", response_model=GuestReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_guest_review(
    review_data: GuestReviewCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GuestReview:
    """Like or dislike the guest of a completed booking (host only)."""
    return await review_service.create_guest_review(
        db,
        host=current_user,
        booking_id=review_data.booking_id,
        sentiment=review_data.sentiment,
    )


@router.get("/", response_model=GuestReputationResponse)
async def get_guest_reputation(
    db: Annotated[AsyncSession, Depends(get_db)],
    guest_id: UUID = Query(...),
) -> GuestReputationResponse:
    """Aggregate host sentiment for a guest."""
    reputation = await review_service.get_guest_reputation(db, guest_id)
    return GuestReputationResponse(guest_id=guest_id, **reputation)
