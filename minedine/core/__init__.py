"""Core utilities and security modules."""

from minedine.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    CapacityExceeded,
    DinnerNotBookable,
    InvalidBookingStatus,
    InvalidReferralCode,
    InvalidStarDistribution,
    NotFoundError,
    PaymentProcessingError,
    ValidationError,
    WebhookSignatureInvalid,
)
from minedine.core.security import create_access_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "CapacityExceeded",
    "DinnerNotBookable",
    "InvalidBookingStatus",
    "InvalidReferralCode",
    "InvalidStarDistribution",
    "NotFoundError",
    "PaymentProcessingError",
    "ValidationError",
    "WebhookSignatureInvalid",
    "create_access_token",
    "verify_token",
]
