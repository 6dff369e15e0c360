"""Payment gateway contract for bookings and café orders.

Every amount crossing this interface is integer cents in the site
currency. A booking or order owns one main payment; a booking can also
own follow-up charges (extension, overage) with their own payments.
Adapters only talk to the provider; pricing and settlement decisions
stay in the API and domain layers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class GatewayType(str, Enum):
    STRIPE = "stripe"
    MANUAL = "manual"  # settled at the front desk


@dataclass
class PaymentResult:
    """A payment the customer still has to complete, or the reason it failed.

    ``transaction_id`` is what gets stored as ``payment_intent_id`` on the
    booking, order or booking charge, and what webhooks report back.
    """

    success: bool
    transaction_id: str | None = None
    amount: int | None = None
    client_secret: str | None = None
    error_message: str | None = None
    raw_response: dict | None = None


@dataclass
class RefundResult:
    success: bool
    refund_id: str | None = None
    amount: int | None = None
    error_message: str | None = None
    raw_response: dict | None = None


class PaymentGateway(ABC):
    """Provider adapter used by GatewayService."""

    @property
    @abstractmethod
    def gateway_type(self) -> GatewayType:
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
        """Open a payment for a booking, booking charge or order.

        Args:
            amount: Cents to collect
            currency: Site currency code
            reference_id: Booking id, order id, or ``{booking_id}-overage``
            description: Shown on the customer's receipt
            metadata: Carries ``type`` (booking, extension, overage, order)
                and the owning ``booking_id`` or ``order_id``
        """
        pass

    @abstractmethod
    async def update_payment(self, transaction_id: str, amount: int) -> PaymentResult:
        """Change the amount of a payment the customer has not completed yet.

        Used when check-out or an extension re-prices an unpaid booking.
        """
        pass

    @abstractmethod
    async def cancel_payment(self, transaction_id: str) -> PaymentResult:
        """Withdraw an uncompleted payment so it can no longer be paid."""
        pass

    @abstractmethod
    async def process_refund(
        self,
        transaction_id: str,
        amount: int,
        reason: str,
    ) -> RefundResult:
        """Return ``amount`` cents of a completed payment.

        Partial refunds are how an early check-out is settled.
        """
        pass

    @abstractmethod
    def verify_webhook(
        self,
        payload: bytes,
        signature: str,
    ) -> dict | None:
        """Parsed provider event, or None when the signature does not match."""
        pass
