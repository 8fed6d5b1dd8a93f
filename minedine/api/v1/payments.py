"""Payment webhook endpoint."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.api.deps import get_db, get_payment_gateway
from minedine.core.exceptions import WebhookSignatureInvalid
from minedine.gateways.base import PaymentGateway
from minedine.models.dinner import Dinner
from minedine.models.user import User
from minedine.services.booking_service import booking_service
from minedine.services.notification_service import notification_service
from minedine.services.review_service import TIP_PAYMENT_TYPE

logger = logging.getLogger(__name__)

router = APIRouter()

HANDLED_EVENTS = ("payment_intent.succeeded", "payment_intent.payment_failed")


def _booking_id_from(intent: dict) -> UUID | None:
    metadata = intent.get("metadata") or {}
    booking_id = metadata.get("booking_id")
    if not booking_id:
        return None
    try:
        return UUID(booking_id)
    except ValueError:
        return None


@router.post("/webhook", status_code=status.HTTP_200_OK)
async def payment_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
) -> dict:
    """Handle payment processor events.

    Delivery is at-least-once, so every branch is safe to repeat. Events this
    service does not handle are acknowledged with 200.
    """
    if not stripe_signature:
        raise WebhookSignatureInvalid("Missing signature")

    # Raw body is needed for signature verification
    payload = await request.body()
    event = gateway.verify_webhook(payload, stripe_signature)
    if event is None:
        raise WebhookSignatureInvalid()

    event_type = event["type"]
    if event_type not in HANDLED_EVENTS:
        logger.info(f"Ignoring webhook event {event_type}")
        return {"received": True}

    intent = event["data"]["object"]
    if (intent.get("metadata") or {}).get("type") == TIP_PAYMENT_TYPE:
        logger.info(f"Webhook {event_type} for tip intent {intent.get('id')}")
        return {"received": True}

    booking_id = _booking_id_from(intent)
    if booking_id is None:
        logger.warning(f"Webhook {event_type} for intent {intent.get('id')} has no booking id")
        return {"received": True}

    logger.info(f"Webhook {event_type} for booking {booking_id}")

    if event_type == "payment_intent.succeeded":
        booking, newly_confirmed = await booking_service.confirm_booking(
            db, booking_id, intent.get("id")
        )
        if booking and newly_confirmed:
            guest = await db.get(User, booking.user_id)
            dinner = await db.get(Dinner, booking.dinner_id)
            background_tasks.add_task(
                notification_service.send_booking_confirmation, guest, booking, dinner
            )
    else:
        await booking_service.cancel_booking(db, booking_id, reason="payment_failed")

    return {"received": True}
