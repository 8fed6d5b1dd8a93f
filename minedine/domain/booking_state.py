"""Booking state machine.

States: PENDING → CONFIRMED → COMPLETED, with CANCELLED reachable from
PENDING (payment failed or abandoned) and CONFIRMED.
"""

from enum import Enum

from minedine.core.exceptions import InvalidBookingStatus


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


BOOKING_TRANSITIONS: dict[str, set[str]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

# Bookings that hold seats at a dinner
SEAT_HOLDING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def status_value(status: str) -> str:
    """Plain string form of a status, whether enum member or column value."""
    return status.value if isinstance(status, Enum) else status


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def assert_booking_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidBookingStatus(
            f"Invalid booking transition: {status_value(current)} → {status_value(target)}"
        )
