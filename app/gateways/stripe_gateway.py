"""Stripe payment gateway adapter."""

import logging

import stripe

from app.config import settings
from app.gateways.base import (
    GatewayType,
    PaymentGateway,
    PaymentResult,
    RefundResult,
)

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    """Stripe payment gateway implementation."""

    def __init__(self):
        self.secret_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret

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

            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency.lower(),
                description=description,
                metadata={"reference_id": reference_id, **(metadata or {})},
                automatic_payment_methods={"enabled": True},
            )

            return PaymentResult(
                success=True,
                transaction_id=intent.id,
                amount=intent.amount,
                client_secret=intent.client_secret,
                raw_response={"id": intent.id, "status": intent.status},
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent creation failed for {reference_id}: {e}")
            return PaymentResult(
                success=False,
                error_message=str(e),
            )

    async def update_payment(self, transaction_id: str, amount: int) -> PaymentResult:
        """Change the amount of an open PaymentIntent."""
        if not self.secret_key:
            return PaymentResult(success=False, error_message="Stripe not configured")

        try:
            stripe.api_key = self.secret_key
            intent = stripe.PaymentIntent.modify(transaction_id, amount=amount)
            return PaymentResult(
                success=True,
                transaction_id=intent.id,
                amount=intent.amount,
                client_secret=intent.client_secret,
                raw_response={"id": intent.id, "status": intent.status},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent update failed for {transaction_id}: {e}")
            return PaymentResult(success=False, error_message=str(e))

    async def cancel_payment(self, transaction_id: str) -> PaymentResult:
        """Cancel an open PaymentIntent."""
        if not self.secret_key:
            return PaymentResult(success=False, error_message="Stripe not configured")

        try:
            stripe.api_key = self.secret_key
            intent = stripe.PaymentIntent.cancel(transaction_id)
            return PaymentResult(
                success=intent.status == "canceled",
                transaction_id=intent.id,
                raw_response={"id": intent.id, "status": intent.status},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent cancel failed for {transaction_id}: {e}")
            return PaymentResult(success=False, error_message=str(e))

    async def process_refund(
        self,
        transaction_id: str,
        amount: int,
        reason: str,
    ) -> RefundResult:
        """Process Stripe refund."""
        if not self.secret_key:
            return RefundResult(
                success=False,
                error_message="Stripe not configured",
            )

        try:
            stripe.api_key = self.secret_key

            refund = stripe.Refund.create(
                payment_intent=transaction_id,
                amount=amount,
                reason="requested_by_customer",
                metadata={"reason": reason[:500]},
            )

            return RefundResult(
                success=refund.status in ("succeeded", "pending"),
                refund_id=refund.id,
                amount=refund.amount,
                raw_response={"status": refund.status, "id": refund.id},
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe refund failed for {transaction_id}: {e}")
            return RefundResult(
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
            return None

        try:
            return stripe.Webhook.construct_event(
                payload,
                signature,
                self.webhook_secret,
            )
        except (ValueError, stripe.SignatureVerificationError):
            return None
