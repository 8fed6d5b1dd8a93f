"""Moderator endpoints: decisions, revenue and stats."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.api.deps import get_current_moderator, get_db
from minedine.models.booking import Booking
from minedine.models.dinner import Dinner
from minedine.models.user import HostApplication, User
from minedine.schemas.booking import BookingResponse
from minedine.schemas.moderation import (
    DecisionRequest,
    DinnerModerationResponse,
    HostApplicationResponse,
    ModeratorStatsResponse,
    RevenueListResponse,
    RevenueShareResponse,
)
from minedine.services.booking_service import booking_service
from minedine.services.moderation_service import moderation_service
from minedine.services.revenue_share_service import revenue_share_service

router = APIRouter()


@router.post("/host-applications/{application_id}/decide", response_model=HostApplicationResponse)
async def decide_host_application(
    application_id: UUID,
    request: DecisionRequest,
    current_user: Annotated[User, Depends(get_current_moderator)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HostApplication:
    """Approve or reject a host application."""
    return await moderation_service.decide_host_application(
        db, current_user, application_id, request.decision, request.note
    )


@router.post("/dinners/{dinner_id}/moderate", response_model=DinnerModerationResponse)
async def moderate_dinner(
    dinner_id: UUID,
    request: DecisionRequest,
    current_user: Annotated[User, Depends(get_current_moderator)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Dinner:
    """Approve or reject a dinner. Rejection cancels it."""
    return await moderation_service.moderate_dinner(db, current_user, dinner_id, request.decision)


@router.get("/revenue", response_model=RevenueListResponse)
async def get_revenue(
    current_user: Annotated[User, Depends(get_current_moderator)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: str | None = Query(
        default=None, alias="status", pattern="^(PENDING|PAID|CANCELLED)$"
    ),
    share_type: str | None = Query(default=None, pattern="^(ONBOARDING|REFERRAL)$"),
) -> RevenueListResponse:
    """Get the current moderator's revenue shares with totals."""
    shares = await revenue_share_service.list_shares(
        db, current_user.id, status=status_filter, share_type=share_type
    )
    return RevenueListResponse(
        revenue_shares=[RevenueShareResponse.model_validate(s) for s in shares],
        totals=revenue_share_service.summarize(shares),
    )


@router.get("/stats", response_model=ModeratorStatsResponse)
async def get_stats(
    current_user: Annotated[User, Depends(get_current_moderator)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ModeratorStatsResponse:
    """Onboarding and referral statistics for the current moderator."""
    stats = await revenue_share_service.moderator_stats(db, current_user)
    return ModeratorStatsResponse(**stats)


@router.get("/unreconciled-payments", response_model=list[BookingResponse])
async def get_unreconciled_payments(
    current_user: Annotated[User, Depends(get_current_moderator)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Booking]:
    """Cancelled bookings whose payment still succeeded and needs a refund."""
    return await booking_service.list_unreconciled_payments(db)
