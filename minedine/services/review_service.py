"""Dinner reviews, review tips and host reviews of guests."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.config import settings
from minedine.core.exceptions import (
    AuthorizationError,
    InvalidBookingStatus,
    NotFoundError,
    PaymentProcessingError,
    ValidationError,
)
from minedine.domain.booking_state import BookingStatus
from minedine.domain.pricing import to_minor_units
from minedine.domain.tip import (
    MAX_TIP_STARS,
    calculate_star_cost,
    calculate_tip_amount,
    validate_star_distribution,
)
from minedine.gateways.base import PaymentGateway
from minedine.models.booking import Booking
from minedine.models.dinner import Dinner
from minedine.models.review import GuestReview, Review
from minedine.models.user import User

logger = logging.getLogger(__name__)

TIP_PAYMENT_TYPE = "review_tip"
GUEST_SENTIMENTS = ("LIKE", "DISLIKE")


class ReviewService:
    """Service for dinner reviews and guest reputation."""

    async def _get_reviewable_booking(
        self, db: AsyncSession, booking_id: UUID, user: User
    ) -> Booking:
        """Load a guest's own COMPLETED booking that has no review yet."""
        booking = await db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        if booking.user_id != user.id:
            raise AuthorizationError("You can only review your own bookings")
        if booking.status != BookingStatus.COMPLETED:
            raise InvalidBookingStatus("Can only review completed bookings")

        existing = await db.execute(select(Review.id).where(Review.booking_id == booking.id))
        if existing.scalar_one_or_none():
            raise ValidationError("Review already exists for this booking")
        return booking

    async def create_tip_intent(
        self,
        db: AsyncSession,
        user: User,
        gateway: PaymentGateway,
        booking_id: UUID,
        tip_stars: int,
    ) -> dict:
        """Create the payment intent for a review tip.

        Returns:
            dict: client_secret, payment_intent_id, tip_amount, star_cost, tip_stars
        """
        if tip_stars < 1 or tip_stars > MAX_TIP_STARS:
            raise ValidationError(f"Tip stars must be 1-{MAX_TIP_STARS}")

        booking = await self._get_reviewable_booking(db, booking_id, user)
        dinner = await db.get(Dinner, booking.dinner_id)

        tip_amount = calculate_tip_amount(booking.total_price, tip_stars)
        payment = await gateway.create_payment(
            amount=to_minor_units(tip_amount),
            currency=settings.stripe_currency,
            reference_id=str(booking.id),
            description=f"Mine Dine tip: {dinner.title}",
            metadata={
                "type": TIP_PAYMENT_TYPE,
                "booking_id": str(booking.id),
                "dinner_id": str(dinner.id),
                "host_id": str(dinner.host_id),
                "guest_id": str(user.id),
                "tip_stars": str(tip_stars),
            },
        )
        if not payment.success:
            logger.error(f"Tip intent creation failed for booking {booking.id}: {payment.error_message}")
            raise PaymentProcessingError("Failed to create tip payment")

        logger.info(f"Created tip intent {payment.transaction_id} for booking {booking.id}")
        return {
            "client_secret": payment.client_secret,
            "payment_intent_id": payment.transaction_id,
            "tip_amount": tip_amount,
            "star_cost": calculate_star_cost(booking.total_price),
            "tip_stars": tip_stars,
        }

    async def _verify_tip_payment(
        self,
        db: AsyncSession,
        gateway: PaymentGateway,
        booking: Booking,
        payment_intent_id: str,
        tip_amount: Decimal,
    ) -> None:
        """Check a tip intent succeeded, belongs to this booking and pays exactly the tip."""
        used = await db.execute(
            select(Review.id).where(Review.tip_payment_intent_id == payment_intent_id)
        )
        if used.scalar_one_or_none():
            raise ValidationError("Tip payment has already been used")

        result = await gateway.verify_payment(payment_intent_id)
        details = result.raw_response or {}
        if not result.success:
            logger.warning(
                f"Tip payment {payment_intent_id} for booking {booking.id} not completed: "
                f"{details.get('status') or result.error_message}"
            )
            raise ValidationError("Tip payment has not been completed")

        metadata = details.get("metadata") or {}
        if metadata.get("booking_id") != str(booking.id):
            raise ValidationError("Tip payment does not belong to this booking")
        if details.get("amount") != to_minor_units(tip_amount):
            raise ValidationError("Tip payment amount does not match the tip stars")

    async def create_review(
        self,
        db: AsyncSession,
        user: User,
        gateway: PaymentGateway,
        booking_id: UUID,
        hospitality_stars: int,
        cleanliness_stars: int,
        taste_stars: int,
        tip_stars: int = 0,
        tip_payment_intent_id: str | None = None,
        comment: str | None = None,
    ) -> Review:
        """Create a guest's review of a completed dinner.

        Raises:
            InvalidStarDistribution: Stars don't add up to 5 + tip_stars
            ValidationError: Tip stars without a verified tip payment
        """
        booking = await self._get_reviewable_booking(db, booking_id, user)
        validate_star_distribution(hospitality_stars, cleanliness_stars, taste_stars, tip_stars)

        tip_amount = Decimal("0.00")
        if tip_stars > 0:
            if not tip_payment_intent_id:
                raise ValidationError("Tip payment is required for tip stars")
            tip_amount = calculate_tip_amount(booking.total_price, tip_stars)
            await self._verify_tip_payment(db, gateway, booking, tip_payment_intent_id, tip_amount)
        else:
            tip_payment_intent_id = None

        review = Review(
            booking_id=booking.id,
            user_id=user.id,
            dinner_id=booking.dinner_id,
            hospitality_stars=hospitality_stars,
            cleanliness_stars=cleanliness_stars,
            taste_stars=taste_stars,
            tip_stars=tip_stars,
            tip_amount=tip_amount,
            tip_payment_intent_id=tip_payment_intent_id,
            comment=comment,
        )
        db.add(review)
        await db.flush()
        await db.refresh(review)

        logger.info(f"Review {review.id} created for booking {booking.id} (tip {tip_amount})")
        return review

    async def list_dinner_reviews(self, db: AsyncSession, dinner_id: UUID) -> list[Review]:
        result = await db.execute(
            select(Review).where(Review.dinner_id == dinner_id).order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    # ==================== GUEST REVIEWS ====================

    async def create_guest_review(
        self,
        db: AsyncSession,
        host: User,
        booking_id: UUID,
        sentiment: str,
    ) -> GuestReview:
        """Record the host's LIKE/DISLIKE of a guest after a completed dinner."""
        if sentiment not in GUEST_SENTIMENTS:
            raise ValidationError("Sentiment must be LIKE or DISLIKE")

        booking = await db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking", str(booking_id))

        dinner = await db.get(Dinner, booking.dinner_id)
        if dinner.host_id != host.id:
            raise AuthorizationError("Only the host can review guests")
        if booking.status != BookingStatus.COMPLETED:
            raise InvalidBookingStatus("Can only review guests after dinner is completed")

        existing = await db.execute(
            select(GuestReview.id).where(GuestReview.booking_id == booking.id)
        )
        if existing.scalar_one_or_none():
            raise ValidationError("Guest already reviewed for this booking")

        guest_review = GuestReview(
            booking_id=booking.id,
            host_id=host.id,
            guest_id=booking.user_id,
            dinner_id=dinner.id,
            sentiment=sentiment,
        )
        db.add(guest_review)
        await db.flush()
        await db.refresh(guest_review)
        return guest_review

    async def get_guest_reputation(self, db: AsyncSession, guest_id: UUID) -> dict:
        """Likes and dislikes a guest has received from hosts."""
        result = await db.execute(
            select(GuestReview.sentiment, func.count(GuestReview.id))
            .where(GuestReview.guest_id == guest_id)
            .group_by(GuestReview.sentiment)
        )
        counts = dict(result.all())
        likes = counts.get("LIKE", 0)
        dislikes = counts.get("DISLIKE", 0)
        total = likes + dislikes
        return {
            "likes": likes,
            "dislikes": dislikes,
            "total": total,
            "like_percentage": round(likes / total * 100) if total else 0,
        }


# Singleton instance
review_service = ReviewService()
