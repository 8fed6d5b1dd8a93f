"""Dinner capacity rules."""

from enum import Enum

from minedine.core.exceptions import CapacityExceeded, DinnerNotBookable


class DinnerStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class ModerationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def remaining_seats(max_guests: int, booked_guests: int) -> int:
    return max(0, max_guests - booked_guests)


def assert_bookable(
    dinner_status: str,
    max_guests: int,
    booked_guests: int,
    requested_guests: int,
) -> None:
    """Check a booking request against a dinner's state and capacity.

    Args:
        dinner_status: Current dinner status
        max_guests: Dinner capacity
        booked_guests: Guests already held by PENDING/CONFIRMED bookings
        requested_guests: Guests in the new request

    Raises:
        DinnerNotBookable: Dinner is not published
        CapacityExceeded: Request would overbook the dinner
    """
    if dinner_status != DinnerStatus.PUBLISHED:
        raise DinnerNotBookable()

    if booked_guests + requested_guests > max_guests:
        raise CapacityExceeded(remaining=remaining_seats(max_guests, booked_guests))
