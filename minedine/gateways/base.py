"""Base payment gateway interface.

All gateway adapters must implement this interface.
Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class GatewayType(str, Enum):
    """Supported payment gateways."""

    STRIPE = "stripe"


@dataclass
class PaymentResult:
    """Result of a payment operation."""

    success: bool
    transaction_id: str | None = None
    client_secret: str | None = None
    error_message: str | None = None
    raw_response: dict | None = None


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def gateway_type(self) -> GatewayType:
        """Return the gateway type."""
        pass

    @abstractmethod
    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        """Create a payment intent.

        Args:
            amount: Amount in smallest currency unit (cents)
            currency: Currency code (EUR)
            reference_id: Internal reference (booking id)
            description: Payment description
            metadata: Additional metadata, echoed back in webhooks

        Returns:
            PaymentResult with transaction id and client secret
        """
        pass

    @abstractmethod
    async def verify_payment(
        self,
        transaction_id: str,
    ) -> PaymentResult:
        """Fetch a payment's current state.

        ``success`` is True only for a succeeded payment; ``raw_response``
        carries ``status``, ``amount`` (cents), ``currency`` and ``metadata``.
        """
        pass

    @abstractmethod
    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Verify webhook signature and parse payload.

        Args:
            payload: Raw request body
            signature: Webhook signature header

        Returns:
            Parsed event dict if valid, None if invalid
        """
        pass
