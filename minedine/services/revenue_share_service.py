"""Moderator revenue-share distribution.

Runs after a booking is confirmed. Creates at most one ONBOARDING share (for
the moderator who approved the host) and one REFERRAL share (for the
moderator whose code the guest used) per booking. Safe to run repeatedly for
the same booking: an existing share of a type is never duplicated, and the
(booking_id, share_type) unique constraint backs that up.
"""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.config import settings
from minedine.domain.booking_state import BookingStatus
from minedine.domain.revenue_share import (
    ShareStatus,
    ShareType,
    calculate_share_amount,
    calculate_share_percentage,
)
from minedine.models.booking import Booking
from minedine.models.dinner import Dinner
from minedine.models.revenue import RevenueShare
from minedine.models.user import HostApplication, User

logger = logging.getLogger(__name__)

# Bookings that count towards a moderator's booking number
COUNTED_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)


class RevenueShareService:
    """Service for creating and reporting moderator revenue shares."""

    async def distribute_revenue_shares(
        self,
        db: AsyncSession,
        booking_id: UUID,
    ) -> list[RevenueShare]:
        """Create the revenue shares a confirmed booking earns.

        Args:
            db: Database session
            booking_id: Booking that was just confirmed

        Returns:
            list[RevenueShare]: Shares created by this call (empty on redelivery)
        """
        booking = await db.get(Booking, booking_id)
        if not booking or booking.status != BookingStatus.CONFIRMED:
            logger.info(f"Skipping revenue shares for booking {booking_id}: not confirmed")
            return []

        dinner = await db.get(Dinner, booking.dinner_id)
        created: list[RevenueShare] = []

        # Onboarding share
        application_result = await db.execute(
            select(HostApplication).where(HostApplication.user_id == dinner.host_id)
        )
        application = application_result.scalar_one_or_none()
        if application and application.status == "APPROVED" and application.onboarded_by_id:
            booking_number = await self._count_host_bookings(db, dinner.host_id, booking.id) + 1
            share = await self._create_share(
                db,
                moderator_id=application.onboarded_by_id,
                booking=booking,
                share_type=ShareType.ONBOARDING,
                booking_number=booking_number,
            )
            if share:
                created.append(share)

        # Referral share
        moderator = await self._resolve_referral_moderator(db, booking)
        if moderator:
            booking_number = (
                await self._count_referral_bookings(db, moderator, booking.id) + 1
            )
            share = await self._create_share(
                db,
                moderator_id=moderator.id,
                booking=booking,
                share_type=ShareType.REFERRAL,
                booking_number=booking_number,
            )
            if share:
                created.append(share)

        return created

    async def _resolve_referral_moderator(
        self, db: AsyncSession, booking: Booking
    ) -> User | None:
        """Moderator credited for the booking's referral, if still eligible."""
        if booking.referral_moderator_id:
            moderator = await db.get(User, booking.referral_moderator_id)
        elif booking.referral_code_used:
            # Rows created before the moderator id was stored
            result = await db.execute(
                select(User).where(User.referral_code == booking.referral_code_used)
            )
            moderator = result.scalar_one_or_none()
        else:
            return None

        if not moderator or moderator.role != "MODERATOR" or not moderator.is_active:
            logger.warning(
                f"Referral on booking {booking.id} no longer maps to an active moderator"
            )
            return None
        return moderator

    async def _count_host_bookings(
        self, db: AsyncSession, host_id: UUID, exclude_booking_id: UUID
    ) -> int:
        result = await db.execute(
            select(func.count(Booking.id))
            .join(Dinner, Booking.dinner_id == Dinner.id)
            .where(
                Dinner.host_id == host_id,
                Booking.status.in_(COUNTED_STATUSES),
                Booking.id != exclude_booking_id,
            )
        )
        return result.scalar() or 0

    async def _count_referral_bookings(
        self, db: AsyncSession, moderator: User, exclude_booking_id: UUID | None = None
    ) -> int:
        attributed = Booking.referral_moderator_id == moderator.id
        if moderator.referral_code:
            attributed = or_(
                attributed,
                (Booking.referral_moderator_id.is_(None))
                & (Booking.referral_code_used == moderator.referral_code),
            )
        query = select(func.count(Booking.id)).where(
            attributed, Booking.status.in_(COUNTED_STATUSES)
        )
        if exclude_booking_id:
            query = query.where(Booking.id != exclude_booking_id)
        result = await db.execute(query)
        return result.scalar() or 0

    async def _create_share(
        self,
        db: AsyncSession,
        moderator_id: UUID,
        booking: Booking,
        share_type: ShareType,
        booking_number: int,
    ) -> RevenueShare | None:
        existing = await db.execute(
            select(RevenueShare.id).where(
                RevenueShare.booking_id == booking.id,
                RevenueShare.share_type == share_type.value,
            )
        )
        if existing.scalar_one_or_none():
            logger.info(f"{share_type.value} share already exists for booking {booking.id}")
            return None

        base_percentage = settings.revenue_share_base_percentage
        percentage = calculate_share_percentage(
            booking_number,
            base_percentage,
            settings.revenue_share_decay_percentage,
        )
        amount = calculate_share_amount(booking.total_price, percentage)
        if amount <= 0:
            return None

        share = RevenueShare(
            moderator_id=moderator_id,
            booking_id=booking.id,
            share_type=share_type.value,
            base_percentage=base_percentage,
            booking_number=booking_number,
            actual_percentage=percentage,
            amount=amount,
            status=ShareStatus.PENDING.value,
        )
        db.add(share)
        await db.flush()

        logger.info(
            f"Created {share_type.value} share of {amount} ({percentage}%) "
            f"for moderator {moderator_id} on booking {booking.id}"
        )
        return share

    # ==================== REPORTING ====================

    async def list_shares(
        self,
        db: AsyncSession,
        moderator_id: UUID,
        status: str | None = None,
        share_type: str | None = None,
    ) -> list[RevenueShare]:
        query = select(RevenueShare).where(RevenueShare.moderator_id == moderator_id)
        if status:
            query = query.where(RevenueShare.status == status)
        if share_type:
            query = query.where(RevenueShare.share_type == share_type)
        result = await db.execute(query.order_by(RevenueShare.created_at.desc()))
        return list(result.scalars().all())

    def summarize(self, shares: list[RevenueShare]) -> dict[str, Decimal]:
        """Totals by status and share type."""
        totals = {
            "total_pending": Decimal("0.00"),
            "total_paid": Decimal("0.00"),
            "total_cancelled": Decimal("0.00"),
            "total_amount": Decimal("0.00"),
            "onboarding_total": Decimal("0.00"),
            "referral_total": Decimal("0.00"),
        }
        for share in shares:
            amount = Decimal(share.amount)
            totals["total_amount"] += amount
            if share.status == ShareStatus.PENDING:
                totals["total_pending"] += amount
            elif share.status == ShareStatus.PAID:
                totals["total_paid"] += amount
            elif share.status == ShareStatus.CANCELLED:
                totals["total_cancelled"] += amount

            if share.share_type == ShareType.ONBOARDING:
                totals["onboarding_total"] += amount
            elif share.share_type == ShareType.REFERRAL:
                totals["referral_total"] += amount
        return totals

    async def moderator_stats(self, db: AsyncSession, moderator: User) -> dict:
        """Onboarding and referral activity for a moderator's dashboard."""
        onboarded_result = await db.execute(
            select(HostApplication.user_id).where(
                HostApplication.onboarded_by_id == moderator.id,
                HostApplication.status == "APPROVED",
            )
        )
        onboarded_host_ids = list(onboarded_result.scalars().all())

        onboarding_bookings = 0
        if onboarded_host_ids:
            count_result = await db.execute(
                select(func.count(Booking.id))
                .join(Dinner, Booking.dinner_id == Dinner.id)
                .where(
                    Dinner.host_id.in_(onboarded_host_ids),
                    Booking.status.in_(COUNTED_STATUSES),
                )
            )
            onboarding_bookings = count_result.scalar() or 0

        referral_bookings = await self._count_referral_bookings(db, moderator)

        shares = await self.list_shares(db, moderator.id)
        return {
            "referral_code": moderator.referral_code,
            "hosts_onboarded": len(onboarded_host_ids),
            "total_onboarding_bookings": onboarding_bookings,
            "total_referral_bookings": referral_bookings,
            "revenue": self.summarize(shares),
        }


# Singleton instance
revenue_share_service = RevenueShareService()
