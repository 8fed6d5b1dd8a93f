"""Dinner review endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.api.deps import get_current_user, get_db, get_payment_gateway
from minedine.gateways.base import PaymentGateway
from minedine.models.review import Review
from minedine.models.user import User
from minedine.schemas.review import (
    ReviewCreate,
    ReviewResponse,
    TipIntentCreate,
    TipIntentResponse,
)
from minedine.services.review_service import review_service

router = APIRouter()


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> Review:
    """Review a completed dinner, spending 5 stars plus any tip stars."""
    return await review_service.create_review(
        db,
        user=current_user,
        gateway=gateway,
        booking_id=review_data.booking_id,
        hospitality_stars=review_data.hospitality_stars,
        cleanliness_stars=review_data.cleanliness_stars,
        taste_stars=review_data.taste_stars,
        tip_stars=review_data.tip_stars,
        tip_payment_intent_id=review_data.tip_payment_intent_id,
        comment=review_data.comment,
    )


@router.get("/", response_model=list[ReviewResponse])
async def get_dinner_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
    dinner_id: UUID = Query(...),
) -> list[Review]:
    """Get reviews for a dinner."""
    return await review_service.list_dinner_reviews(db, dinner_id)


@router.post("/tip", response_model=TipIntentResponse)
async def create_tip_intent(
    tip_data: TipIntentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> TipIntentResponse:
    """Start paying for tip stars before submitting a review."""
    result = await review_service.create_tip_intent(
        db,
        user=current_user,
        gateway=gateway,
        booking_id=tip_data.booking_id,
        tip_stars=tip_data.tip_stars,
    )
    return TipIntentResponse(**result)
