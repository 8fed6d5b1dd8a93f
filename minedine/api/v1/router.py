"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from minedine.api.v1 import (
    bookings,
    dinners,
    guest_reviews,
    moderators,
    payments,
    reviews,
)

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Payments
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])

# Reviews
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(guest_reviews.router, prefix="/guest-reviews", tags=["Guest Reviews"])

# Dinners
api_router.include_router(dinners.router, prefix="/dinners", tags=["Dinners"])

# Moderators
api_router.include_router(moderators.router, prefix="/moderators", tags=["Moderators"])
