"""Manual payment gateway adapter for front-desk settlement."""

from app.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
    RefundResult,
)


class ManualGateway(PaymentGateway):
    """Manual gateway: amounts are settled at the front desk.

    Operations are recorded as accepted; staff reconcile them by hand.
    """

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.MANUAL

    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        """Create a front-desk payment request (always accepted)."""
        return PaymentResult(
            success=True,
            transaction_id=f"manual_{reference_id}",
            amount=amount,
            raw_response={
                "type": "front_desk",
                "status": "pending_collection",
                "currency": currency,
                "description": description,
            },
        )

    async def update_payment(self, transaction_id: str, amount: int) -> PaymentResult:
        """Front desk collects whatever the booking now says."""
        return PaymentResult(
            success=True,
            transaction_id=transaction_id,
            amount=amount,
            raw_response={"type": "front_desk", "status": "pending_collection"},
        )

    async def cancel_payment(self, transaction_id: str) -> PaymentResult:
        return PaymentResult(
            success=True,
            transaction_id=transaction_id,
            raw_response={"type": "front_desk", "status": "cancelled"},
        )

    async def process_refund(
        self,
        transaction_id: str,
        amount: int,
        reason: str,
    ) -> RefundResult:
        """Record a refund for staff to pay out."""
        return RefundResult(
            success=True,
            refund_id=f"refund_{transaction_id}",
            amount=amount,
            raw_response={
                "type": "manual_refund",
                "status": "pending",
                "reason": reason,
            },
        )

    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Manual gateway doesn't have webhooks."""
        return None
