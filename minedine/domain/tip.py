"""Review star budget and tip calculation.

Every guest gets 5 base stars to spread across hospitality, cleanliness and
taste. Extra stars can be bought as a tip at 1% of the booking total each,
up to 10. A review must spend exactly 5 + tip_stars stars.
"""

from decimal import ROUND_HALF_UP, Decimal

from minedine.core.exceptions import InvalidStarDistribution
from minedine.domain.pricing import to_money

BASE_STARS = 5
MAX_CATEGORY_STARS = 5
MAX_TIP_STARS = 10
TIP_PERCENTAGE_PER_STAR = Decimal("0.01")


def _clamp_tip_stars(tip_stars: int) -> int:
    return min(max(0, tip_stars), MAX_TIP_STARS)


def calculate_tip_amount(booking_total_price: Decimal, tip_stars: int) -> Decimal:
    """Tip in EUR for a number of tip stars (clamped to 0-10)."""
    stars = _clamp_tip_stars(tip_stars)
    return to_money(Decimal(booking_total_price) * TIP_PERCENTAGE_PER_STAR * stars)


def calculate_star_cost(booking_total_price: Decimal) -> Decimal:
    """Price of a single tip star."""
    return to_money(Decimal(booking_total_price) * TIP_PERCENTAGE_PER_STAR)


def tip_stars_from_amount(booking_total_price: Decimal, tip_amount: Decimal) -> int:
    """Recover the star count a tip amount pays for."""
    star_cost = Decimal(booking_total_price) * TIP_PERCENTAGE_PER_STAR
    if star_cost <= 0:
        return 0
    stars = (Decimal(tip_amount) / star_cost).to_integral_value(rounding=ROUND_HALF_UP)
    return _clamp_tip_stars(int(stars))


def get_total_available_stars(tip_stars: int) -> int:
    return BASE_STARS + _clamp_tip_stars(tip_stars)


def validate_star_distribution(
    hospitality_stars: int,
    cleanliness_stars: int,
    taste_stars: int,
    tip_stars: int,
) -> None:
    """Validate a review's star allocation.

    Raises:
        InvalidStarDistribution: A category is outside 0-5, tip_stars is
            outside 0-10, or the stars used differ from 5 + tip_stars
    """
    categories = (
        ("Hospitality", hospitality_stars),
        ("Cleanliness", cleanliness_stars),
        ("Taste", taste_stars),
    )
    for label, stars in categories:
        if stars < 0 or stars > MAX_CATEGORY_STARS:
            raise InvalidStarDistribution(f"{label} must be 0-{MAX_CATEGORY_STARS} stars")

    if tip_stars < 0 or tip_stars > MAX_TIP_STARS:
        raise InvalidStarDistribution(f"Tip stars must be 0-{MAX_TIP_STARS}")

    total_used = hospitality_stars + cleanliness_stars + taste_stars
    expected_total = BASE_STARS + tip_stars
    if total_used != expected_total:
        raise InvalidStarDistribution(
            f"Must use exactly {expected_total} stars (you used {total_used})"
        )
