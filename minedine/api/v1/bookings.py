"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.api.deps import get_current_user, get_db, get_payment_gateway
from minedine.core.exceptions import AuthorizationError
from minedine.domain.pricing import AddOnSelection
from minedine.gateways.base import PaymentGateway
from minedine.models.booking import Booking
from minedine.models.user import User
from minedine.schemas.booking import (
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingResponse,
)
from minedine.services.booking_service import booking_service

router = APIRouter()


@router.post("/", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> BookingCreateResponse:
    """Create a PENDING booking and start its payment."""
    booking, payment = await booking_service.create_booking(
        db,
        user=current_user,
        gateway=gateway,
        dinner_id=booking_data.dinner_id,
        number_of_guests=booking_data.number_of_guests,
        selected_add_ons=[
            AddOnSelection(add_on_id=item.add_on_id, quantity=item.quantity)
            for item in booking_data.selected_add_ons
        ],
        referral_code=booking_data.referral_code,
    )
    return BookingCreateResponse(
        booking=BookingResponse.model_validate(booking),
        client_secret=payment.client_secret,
        payment_intent_id=payment.transaction_id,
    )


@router.get("/", response_model=BookingListResponse)
async def get_my_bookings(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: str | None = Query(
        default=None,
        alias="status",
        pattern="^(PENDING|CONFIRMED|CANCELLED|COMPLETED)$",
    ),
) -> BookingListResponse:
    """Get bookings for the current user."""
    bookings = await booking_service.list_bookings(db, current_user.id, status_filter)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get a booking by ID (its guest or staff only)."""
    booking = await booking_service.get_booking(db, booking_id)
    if booking.user_id != current_user.id and not current_user.is_moderator:
        raise AuthorizationError("You don't have access to this booking")
    return booking
