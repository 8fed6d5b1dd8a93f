"""Database models."""

from minedine.models.booking import Booking
from minedine.models.dinner import Dinner, DinnerAddOn
from minedine.models.revenue import RevenueShare
from minedine.models.review import GuestReview, Review
from minedine.models.user import HostApplication, User

__all__ = [
    # User
    "User",
    "HostApplication",
    # Dinner
    "Dinner",
    "DinnerAddOn",
    # Booking
    "Booking",
    # Review
    "Review",
    "GuestReview",
    # Revenue
    "RevenueShare",
]
