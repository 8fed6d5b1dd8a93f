"""Stripe payment gateway adapter."""

import logging

import stripe

from minedine.config import settings
from minedine.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
)

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    """Stripe payment gateway implementation."""

    def __init__(self, secret_key: str | None = None, webhook_secret: str | None = None):
        self.secret_key = secret_key or settings.stripe_secret_key
        self.webhook_secret = webhook_secret or settings.stripe_webhook_secret

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.STRIPE

    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        """Create Stripe PaymentIntent."""
        if not self.secret_key:
            return PaymentResult(
                success=False,
                error_message="Stripe not configured",
            )

        try:
            stripe.api_key = self.secret_key

            # Stripe metadata values must be strings
            intent_metadata = {
                key: str(value)
                for key, value in {"reference_id": reference_id, **(metadata or {})}.items()
            }
            intent = await stripe.PaymentIntent.create_async(
                amount=amount,
                currency=currency.lower(),
                description=description,
                metadata=intent_metadata,
                automatic_payment_methods={"enabled": True},
            )

            return PaymentResult(
                success=True,
                transaction_id=intent.id,
                client_secret=intent.client_secret,
                raw_response={"id": intent.id, "status": intent.status},
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent creation failed for {reference_id}: {e}")
            return PaymentResult(
                success=False,
                error_message=str(e),
            )

    async def verify_payment(
        self,
        transaction_id: str,
    ) -> PaymentResult:
        """Verify Stripe payment status."""
        if not self.secret_key:
            return PaymentResult(
                success=False,
                error_message="Stripe not configured",
            )

        try:
            stripe.api_key = self.secret_key

            intent = await stripe.PaymentIntent.retrieve_async(transaction_id)
            # StripeObject is not a mapping; work on its plain-dict form
            data = intent.to_dict()

            return PaymentResult(
                success=data.get("status") == "succeeded",
                transaction_id=transaction_id,
                raw_response={
                    "status": data.get("status"),
                    "amount": data.get("amount"),
                    "currency": data.get("currency"),
                    "metadata": data.get("metadata") or {},
                },
            )

        except stripe.StripeError as e:
            logger.warning(f"Stripe PaymentIntent lookup failed for {transaction_id}: {e}")
            return PaymentResult(
                success=False,
                error_message=str(e),
            )

    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Verify Stripe webhook signature."""
        if not self.webhook_secret:
            logger.error("Stripe webhook secret is not configured")
            return None

        try:
            event = stripe.Webhook.construct_event(
                payload,
                signature,
                self.webhook_secret,
            )
            return event.to_dict()

        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Stripe webhook verification failed: {e}")
            return None
