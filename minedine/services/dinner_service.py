"""Dinner add-on catalogue management."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from minedine.domain.booking_state import BookingStatus
from minedine.domain.pricing import to_money
from minedine.models.booking import Booking
from minedine.models.dinner import Dinner, DinnerAddOn
from minedine.models.user import User

logger = logging.getLogger(__name__)

# Bookings whose add-on snapshot freezes the catalogue entry
LOCKING_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)


class DinnerService:
    """Service for a host's dinner add-ons."""

    async def _get_managed_dinner(self, db: AsyncSession, user: User, dinner_id: UUID) -> Dinner:
        dinner = await db.get(Dinner, dinner_id)
        if not dinner:
            raise NotFoundError("Dinner", str(dinner_id))
        if dinner.host_id != user.id and user.role != "ADMIN":
            raise AuthorizationError("Only the host can manage add-ons")
        return dinner

    async def list_add_ons(self, db: AsyncSession, dinner_id: UUID) -> list[DinnerAddOn]:
        result = await db.execute(
            select(DinnerAddOn)
            .where(DinnerAddOn.dinner_id == dinner_id)
            .order_by(DinnerAddOn.created_at)
        )
        return list(result.scalars().all())

    async def create_add_on(
        self,
        db: AsyncSession,
        user: User,
        dinner_id: UUID,
        name: str,
        price: Decimal,
        description: str | None = None,
    ) -> DinnerAddOn:
        dinner = await self._get_managed_dinner(db, user, dinner_id)
        add_on = DinnerAddOn(
            dinner_id=dinner.id,
            name=name,
            description=description,
            price=to_money(price),
        )
        db.add(add_on)
        await db.flush()
        await db.refresh(add_on)
        logger.info(f"Add-on {add_on.id} created for dinner {dinner.id}")
        return add_on

    async def is_add_on_locked(self, db: AsyncSession, add_on: DinnerAddOn) -> bool:
        """True once a confirmed or completed booking has bought this add-on."""
        result = await db.execute(
            select(Booking.selected_add_ons).where(
                Booking.dinner_id == add_on.dinner_id,
                Booking.status.in_(LOCKING_STATUSES),
            )
        )
        add_on_id = str(add_on.id)
        return any(
            item.get("add_on_id") == add_on_id
            for snapshot in result.scalars().all()
            for item in snapshot or []
        )

    async def update_add_on(
        self,
        db: AsyncSession,
        user: User,
        dinner_id: UUID,
        add_on_id: UUID,
        changes: dict,
    ) -> DinnerAddOn:
        """Update an add-on that no paid booking references yet.

        Raises:
            ValidationError: A CONFIRMED or COMPLETED booking includes the add-on
        """
        await self._get_managed_dinner(db, user, dinner_id)
        add_on = await db.get(DinnerAddOn, add_on_id)
        if not add_on or add_on.dinner_id != dinner_id:
            raise NotFoundError("Add-on", str(add_on_id))

        if await self.is_add_on_locked(db, add_on):
            raise ValidationError("Add-on is part of a confirmed booking and can no longer be changed")

        for field, value in changes.items():
            if field == "price":
                value = to_money(value)
            setattr(add_on, field, value)

        await db.flush()
        await db.refresh(add_on)
        return add_on


# Singleton instance
dinner_service = DinnerService()
