"""Booking lifecycle service.

Creates PENDING bookings with a payment intent and moves them through the
state machine when payment webhooks and periodic sweeps arrive.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.config import settings
from minedine.core.exceptions import NotFoundError, PaymentProcessingError, ValidationError
from minedine.domain.availability import assert_bookable
from minedine.domain.booking_state import (
    SEAT_HOLDING_STATUSES,
    BookingStatus,
    assert_booking_transition,
)
from minedine.domain.pricing import (
    AddOnSelection,
    CatalogueItem,
    calculate_booking_price,
    to_minor_units,
)
from minedine.gateways.base import PaymentGateway, PaymentResult
from minedine.models.booking import Booking
from minedine.models.dinner import Dinner, DinnerAddOn
from minedine.models.user import User
from minedine.services.referral_service import referral_service
from minedine.services.revenue_share_service import revenue_share_service

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking creation and state transitions."""

    async def count_booked_guests(self, db: AsyncSession, dinner_id: UUID) -> int:
        """Guests held by PENDING and CONFIRMED bookings of a dinner."""
        result = await db.execute(
            select(func.coalesce(func.sum(Booking.number_of_guests), 0)).where(
                Booking.dinner_id == dinner_id,
                Booking.status.in_(SEAT_HOLDING_STATUSES),
            )
        )
        return int(result.scalar() or 0)

    async def check_availability(
        self,
        db: AsyncSession,
        dinner_id: UUID,
        number_of_guests: int,
    ) -> Dinner:
        """Lock the dinner row and check it can seat the request.

        The lock is held until the caller's transaction ends, so concurrent
        bookings for the same dinner are checked one after another.

        Raises:
            NotFoundError: Dinner does not exist
            DinnerNotBookable: Dinner is not published
            CapacityExceeded: Not enough seats left
        """
        result = await db.execute(
            select(Dinner).where(Dinner.id == dinner_id).with_for_update()
        )
        dinner = result.scalar_one_or_none()
        if not dinner:
            raise NotFoundError("Dinner", str(dinner_id))

        booked_guests = await self.count_booked_guests(db, dinner.id)
        assert_bookable(dinner.status, dinner.max_guests, booked_guests, number_of_guests)
        return dinner

    async def create_booking(
        self,
        db: AsyncSession,
        user: User,
        gateway: PaymentGateway,
        dinner_id: UUID,
        number_of_guests: int,
        selected_add_ons: Iterable[AddOnSelection] = (),
        referral_code: str | None = None,
    ) -> tuple[Booking, PaymentResult]:
        """Create a PENDING booking and its payment intent.

        The booking is committed before the payment processor is called, so
        a processor failure leaves it PENDING until the expiry sweep cancels it.

        Returns:
            tuple: The booking and the payment result carrying the client secret

        Raises:
            ValidationError: Own dinner or invalid add-on selection
            InvalidReferralCode: Code does not belong to an active moderator
            PaymentProcessingError: Payment intent could not be created
        """
        dinner = await self.check_availability(db, dinner_id, number_of_guests)
        if dinner.host_id == user.id:
            raise ValidationError("You cannot book your own dinner")

        add_ons_result = await db.execute(
            select(DinnerAddOn).where(DinnerAddOn.dinner_id == dinner.id)
        )
        catalogue = {
            add_on.id: CatalogueItem(name=add_on.name, price=add_on.price)
            for add_on in add_ons_result.scalars().all()
        }
        price = calculate_booking_price(
            dinner.base_price_per_person,
            number_of_guests,
            selected_add_ons,
            catalogue,
        )

        moderator = None
        if referral_code:
            moderator = await referral_service.validate_referral_code(db, referral_code)

        booking = Booking(
            user_id=user.id,
            dinner_id=dinner.id,
            number_of_guests=number_of_guests,
            base_price=price.base_price,
            add_ons_total=price.add_ons_total,
            total_price=price.total_price,
            selected_add_ons=price.line_items,
            referral_code_used=referral_code if moderator else None,
            referral_moderator_id=moderator.id if moderator else None,
            status=BookingStatus.PENDING.value,
        )
        db.add(booking)
        await db.flush()
        await db.commit()
        logger.info(
            f"Created booking {booking.id} for dinner {dinner.id}: "
            f"{number_of_guests} guests, total {price.total_price}"
        )

        payment = await gateway.create_payment(
            amount=to_minor_units(price.total_price),
            currency=settings.stripe_currency,
            reference_id=str(booking.id),
            description=f"Mine Dine booking: {dinner.title}",
            metadata={
                "booking_id": str(booking.id),
                "user_id": str(user.id),
                "dinner_id": str(dinner.id),
            },
        )
        if not payment.success:
            logger.error(
                f"Payment intent creation failed for booking {booking.id}: "
                f"{payment.error_message}"
            )
            raise PaymentProcessingError("Failed to create payment intent")

        booking.stripe_payment_intent_id = payment.transaction_id
        await db.flush()
        await db.refresh(booking)
        return booking, payment

    async def get_booking(self, db: AsyncSession, booking_id: UUID) -> Booking:
        booking = await db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def list_bookings(
        self,
        db: AsyncSession,
        user_id: UUID,
        status: str | None = None,
    ) -> list[Booking]:
        query = select(Booking).where(Booking.user_id == user_id)
        if status:
            query = query.where(Booking.status == status)
        result = await db.execute(query.order_by(Booking.created_at.desc()))
        return list(result.scalars().all())

    async def list_unreconciled_payments(self, db: AsyncSession) -> list[Booking]:
        """Cancelled bookings that were paid for anyway."""
        result = await db.execute(
            select(Booking)
            .where(Booking.unreconciled_payment_intent_id.is_not(None))
            .order_by(Booking.cancelled_at.desc())
        )
        return list(result.scalars().all())

    async def confirm_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        payment_intent_id: str | None,
    ) -> tuple[Booking | None, bool]:
        """Confirm a booking after its payment succeeded.

        Confirming an already CONFIRMED booking changes nothing. Revenue
        distribution runs after the confirmation is committed, on every
        delivery, and its failure never undoes the confirmation.

        Returns:
            tuple: The booking (None if unknown) and whether this call confirmed it
        """
        booking = await db.get(Booking, booking_id, with_for_update=True)
        if not booking:
            logger.warning(f"Payment succeeded for unknown booking {booking_id}")
            return None, False

        newly_confirmed = False
        if booking.status == BookingStatus.CONFIRMED:
            logger.info(f"Booking {booking.id} already confirmed")
        elif booking.status == BookingStatus.PENDING:
            assert_booking_transition(booking.status, BookingStatus.CONFIRMED)
            booking.status = BookingStatus.CONFIRMED.value
            booking.stripe_payment_intent_id = payment_intent_id or booking.stripe_payment_intent_id
            booking.confirmed_at = datetime.now(UTC)
            newly_confirmed = True
        elif booking.status == BookingStatus.CANCELLED and payment_intent_id:
            # Guest was charged for a booking that can't be honoured
            booking.unreconciled_payment_intent_id = payment_intent_id
            await db.commit()
            logger.error(
                f"Payment {payment_intent_id} succeeded for cancelled booking {booking.id}; "
                f"flagged for manual refund"
            )
            return booking, False
        else:
            logger.error(
                f"Payment {payment_intent_id} succeeded for booking {booking.id} "
                f"in status {booking.status}; leaving it unchanged"
            )
            return booking, False

        await db.commit()
        if newly_confirmed:
            logger.info(f"Booking {booking.id} confirmed")

        await self._distribute_revenue(db, booking)
        return booking, newly_confirmed

    async def _distribute_revenue(self, db: AsyncSession, booking: Booking) -> None:
        try:
            shares = await revenue_share_service.distribute_revenue_shares(db, booking.id)
            await db.commit()
        except Exception as e:
            await db.rollback()
            await db.refresh(booking)
            logger.exception(f"Revenue share distribution failed for booking {booking.id}: {e}")
            return

        if shares:
            logger.info(f"Created {len(shares)} revenue share(s) for booking {booking.id}")

    async def cancel_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        reason: str = "payment_failed",
    ) -> Booking | None:
        """Cancel a PENDING booking whose payment failed.

        Bookings in any other status are left alone.
        """
        booking = await db.get(Booking, booking_id, with_for_update=True)
        if not booking:
            logger.warning(f"Payment failed for unknown booking {booking_id}")
            return None

        if booking.status != BookingStatus.PENDING:
            logger.info(
                f"Ignoring {reason} for booking {booking.id} in status {booking.status}"
            )
            return booking

        assert_booking_transition(booking.status, BookingStatus.CANCELLED)
        booking.status = BookingStatus.CANCELLED.value
        booking.cancelled_at = datetime.now(UTC)
        await db.flush()
        logger.info(f"Booking {booking.id} cancelled: {reason}")
        return booking

    # ==================== PERIODIC SWEEPS ====================

    async def expire_pending_bookings(
        self,
        db: AsyncSession,
        now: datetime | None = None,
    ) -> int:
        """Cancel PENDING bookings whose payment was never completed.

        Returns:
            int: Number of bookings cancelled
        """
        now = now or datetime.now(UTC)
        cutoff = now - timedelta(minutes=settings.pending_booking_ttl_minutes)
        result = await db.execute(
            select(Booking)
            .where(
                Booking.status == BookingStatus.PENDING.value,
                Booking.created_at < cutoff,
            )
            .with_for_update(skip_locked=True)
        )
        bookings = list(result.scalars().all())
        for booking in bookings:
            assert_booking_transition(booking.status, BookingStatus.CANCELLED)
            booking.status = BookingStatus.CANCELLED.value
            booking.cancelled_at = now
            logger.info(f"Expired unpaid booking {booking.id}")

        await db.flush()
        return len(bookings)

    async def complete_past_bookings(
        self,
        db: AsyncSession,
        now: datetime | None = None,
    ) -> int:
        """Mark CONFIRMED bookings of dinners that already took place as COMPLETED.

        Returns:
            int: Number of bookings completed
        """
        now = now or datetime.now(UTC)
        result = await db.execute(
            select(Booking)
            .join(Dinner, Booking.dinner_id == Dinner.id)
            .where(
                Booking.status == BookingStatus.CONFIRMED.value,
                Dinner.date_time < now,
            )
            .with_for_update(of=Booking, skip_locked=True)
        )
        bookings = list(result.scalars().all())
        for booking in bookings:
            assert_booking_transition(booking.status, BookingStatus.COMPLETED)
            booking.status = BookingStatus.COMPLETED.value
            booking.completed_at = now

        await db.flush()
        if bookings:
            logger.info(f"Completed {len(bookings)} past booking(s)")
        return len(bookings)


# Singleton instance
booking_service = BookingService()
