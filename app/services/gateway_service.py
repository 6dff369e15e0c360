"""Payment gateway service.

Routes payment operations to the configured gateway adapter.
No business logic here - only gateway coordination.
"""

from app.config import settings
from app.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
    RefundResult,
)
from app.gateways.manual import ManualGateway
from app.gateways.stripe_gateway import StripeGateway


def _assert_production_for_real_gateway(gateway_type: GatewayType) -> None:
    """Block live Stripe calls outside production unless a test key is set.

    Raises:
        RuntimeError: If attempting a live gateway operation outside production
    """
    if gateway_type != GatewayType.STRIPE or settings.environment == "production":
        return
    if settings.stripe_secret_key and settings.stripe_secret_key.startswith("sk_live_"):
        raise RuntimeError(
            f"Cannot execute live {gateway_type.value} gateway operations "
            f"in {settings.environment} environment. Use a test key."
        )


class GatewayService:
    """Service for managing payment gateway operations."""

    def __init__(self, default_gateway: str | GatewayType | None = None):
        self._gateways: dict[GatewayType, PaymentGateway] = {}
        self.default_gateway = default_gateway or settings.payment_gateway

    def _get_gateway(self, gateway_type: str | GatewayType | None = None) -> PaymentGateway:
        """Get or create gateway instance."""
        gateway_type = gateway_type or self.default_gateway
        if isinstance(gateway_type, str):
            try:
                gateway_type = GatewayType(gateway_type)
            except ValueError:
                gateway_type = GatewayType.MANUAL

        if gateway_type not in self._gateways:
            if gateway_type == GatewayType.STRIPE:
                self._gateways[gateway_type] = StripeGateway()
            else:
                self._gateways[gateway_type] = ManualGateway()

        return self._gateways[gateway_type]

    async def create_payment(
        self,
        amount: int,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
        gateway_type: str | GatewayType | None = None,
    ) -> PaymentResult:
        """Create payment via the configured gateway."""
        gateway = self._get_gateway(gateway_type)
        _assert_production_for_real_gateway(gateway.gateway_type)
        return await gateway.create_payment(
            amount=amount,
            currency=settings.currency,
            reference_id=reference_id,
            description=description,
            metadata=metadata,
        )

    async def update_payment(
        self,
        transaction_id: str,
        amount: int,
        gateway_type: str | GatewayType | None = None,
    ) -> PaymentResult:
        """Re-price an open payment via the configured gateway."""
        gateway = self._get_gateway(gateway_type)
        _assert_production_for_real_gateway(gateway.gateway_type)
        return await gateway.update_payment(transaction_id=transaction_id, amount=amount)

    async def cancel_payment(
        self,
        transaction_id: str,
        gateway_type: str | GatewayType | None = None,
    ) -> PaymentResult:
        """Cancel an open payment via the configured gateway."""
        gateway = self._get_gateway(gateway_type)
        _assert_production_for_real_gateway(gateway.gateway_type)
        return await gateway.cancel_payment(transaction_id=transaction_id)

    async def process_refund(
        self,
        transaction_id: str,
        amount: int,
        reason: str,
        gateway_type: str | GatewayType | None = None,
    ) -> RefundResult:
        """Process refund via the configured gateway."""
        gateway = self._get_gateway(gateway_type)
        _assert_production_for_real_gateway(gateway.gateway_type)
        return await gateway.process_refund(
            transaction_id=transaction_id,
            amount=amount,
            reason=reason,
        )

    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
        gateway_type: str | GatewayType | None = None,
    ) -> dict | None:
        """Verify webhook from gateway."""
        gateway = self._get_gateway(gateway_type)
        return gateway.verify_webhook(payload, signature)


# Singleton instance
gateway_service = GatewayService()
