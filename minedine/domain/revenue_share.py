"""Moderator revenue-share rules.

A moderator earns a share of a confirmed booking when they onboarded the host
(ONBOARDING) or when the guest booked with their referral code (REFERRAL).
Both can apply to the same booking.

The share starts at the base percentage for the first booking and drops by
the decay for every booking after it, never going below zero:

    percentage(n) = max(0, base - (n - 1) * decay)
"""

from decimal import Decimal
from enum import Enum

from minedine.domain.pricing import to_money

DEFAULT_BASE_PERCENTAGE = Decimal("5.0")
DEFAULT_DECAY_PERCENTAGE = Decimal("0.1")


class ShareType(str, Enum):
    ONBOARDING = "ONBOARDING"
    REFERRAL = "REFERRAL"


class ShareStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


def calculate_share_percentage(
    booking_number: int,
    base_percentage: Decimal = DEFAULT_BASE_PERCENTAGE,
    decay_percentage: Decimal = DEFAULT_DECAY_PERCENTAGE,
) -> Decimal:
    """Share percentage for the n-th attributed booking (1-based)."""
    if booking_number < 1:
        raise ValueError("booking_number starts at 1")
    percentage = Decimal(base_percentage) - (booking_number - 1) * Decimal(decay_percentage)
    return max(Decimal("0"), percentage)


def calculate_share_amount(total_price: Decimal, percentage: Decimal) -> Decimal:
    return to_money(Decimal(total_price) * Decimal(percentage) / Decimal("100"))
