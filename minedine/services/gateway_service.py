"""Payment gateway service.

Routes payment operations to the appropriate gateway adapter.
No business logic here - only gateway coordination.
"""

from minedine.config import settings
from minedine.gateways.base import GatewayType, PaymentGateway
from minedine.gateways.stripe_gateway import StripeGateway


def _is_production() -> bool:
    """Check if running in production environment."""
    return settings.environment == "production"


def _assert_test_mode_outside_production(gateway: PaymentGateway) -> None:
    """Block live-mode keys in non-production environments.

    Raises:
        RuntimeError: If a live Stripe key is configured outside production
    """
    if gateway.gateway_type == GatewayType.STRIPE and not _is_production():
        secret_key = getattr(gateway, "secret_key", None)
        if secret_key and not secret_key.startswith(("sk_test_", "rk_test_")):
            raise RuntimeError(
                f"Cannot use a live Stripe key in {settings.environment} environment. "
                "Use a test-mode key or set ENVIRONMENT=production."
            )


class GatewayService:
    """Service for managing payment gateway instances."""

    def __init__(self):
        self._gateways: dict[GatewayType, PaymentGateway] = {}

    def get_gateway(self, gateway_type: str | GatewayType = GatewayType.STRIPE) -> PaymentGateway:
        """Get or create gateway instance."""
        if isinstance(gateway_type, str):
            gateway_type = GatewayType(gateway_type)

        if gateway_type not in self._gateways:
            gateway = StripeGateway()
            _assert_test_mode_outside_production(gateway)
            self._gateways[gateway_type] = gateway

        return self._gateways[gateway_type]


# Singleton instance
gateway_service = GatewayService()
