"""Booking payment follow-up.

Keeps what a member pays in line with what the booking ends up costing.

- A booking has one main payment opened at creation for its estimate
- While the main payment is unpaid, re-pricing simply changes its amount
- Once it is paid, added hours become ``extension`` charges and time
  used past the booked end becomes an ``overage`` charge
- Early check-out refunds whatever was captured beyond the final charge

Gateway failures are returned on PaymentFollowUp, not raised; callers
decide whether the operation can stand without the payment step.
"""

import logging
import uuid
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, BookingCharge
from app.services.gateway_service import gateway_service

logger = logging.getLogger(__name__)


@dataclass
class PaymentFollowUp:
    """What the member has to pay next, what was refunded, or what failed."""

    payment_intent_id: str | None = None
    client_secret: str | None = None
    amount_due: int = 0
    refund_id: str | None = None
    refund_amount: int = 0
    charge: BookingCharge | None = None
    error: str | None = None


class BookingPaymentService:
    """Opens, re-prices, cancels and refunds the payments behind a booking."""

    async def get_charges(self, db: AsyncSession, booking_id: UUID) -> list[BookingCharge]:
        result = await db.execute(select(BookingCharge).where(BookingCharge.booking_id == booking_id))
        return list(result.scalars().all())

    def main_payment_amount(self, booking: Booking, charges: list[BookingCharge]) -> int:
        """Cents the main payment was taken for.

        Extension charges are already added into ``total_price``.
        """
        extensions = sum(c.amount for c in charges if c.kind == "extension")
        return booking.total_price - extensions

    def captured_amount(self, booking: Booking, charges: list[BookingCharge]) -> int:
        """Cents collected so far for a booking whose main payment is paid."""
        paid_charges = sum(c.amount for c in charges if c.payment_status == "paid")
        return self.main_payment_amount(booking, charges) + paid_charges

    async def request_main_payment(self, booking: Booking, amount: int) -> PaymentFollowUp:
        """Point the booking's unpaid main payment at ``amount`` cents."""
        if booking.payment_intent_id:
            result = await gateway_service.update_payment(booking.payment_intent_id, amount)
        else:
            result = await gateway_service.create_payment(
                amount=amount,
                reference_id=str(booking.id),
                description=f"Booking {booking.confirmation_code}",
                metadata={"booking_id": str(booking.id), "type": "booking"},
            )
        if not result.success:
            logger.error(f"Main payment update failed for booking {booking.id}: {result.error_message}")
            return PaymentFollowUp(error=result.error_message or "Could not update payment")

        booking.payment_intent_id = result.transaction_id
        return PaymentFollowUp(
            payment_intent_id=result.transaction_id,
            client_secret=result.client_secret,
            amount_due=amount,
        )

    async def add_charge(
        self, db: AsyncSession, booking: Booking, kind: str, amount: int
    ) -> PaymentFollowUp:
        """Open a follow-up payment and record it against the booking."""
        charge = BookingCharge(
            id=uuid.uuid4(),
            booking_id=booking.id,
            kind=kind,
            amount=amount,
            payment_status="pending",
        )
        reference_id = f"{booking.id}-overage" if kind == "overage" else f"{booking.id}-{kind}-{charge.id}"
        result = await gateway_service.create_payment(
            amount=amount,
            reference_id=reference_id,
            description=f"{kind.capitalize()} for booking {booking.confirmation_code}",
            metadata={"booking_id": str(booking.id), "charge_id": str(charge.id), "type": kind},
        )
        if not result.success:
            logger.error(f"{kind.capitalize()} payment failed for booking {booking.id}: {result.error_message}")
            return PaymentFollowUp(error=result.error_message or "Could not create payment")

        charge.payment_intent_id = result.transaction_id
        db.add(charge)
        await db.flush()
        logger.info(f"{kind.capitalize()} charge of {amount} opened for booking {booking.confirmation_code}")
        return PaymentFollowUp(
            payment_intent_id=result.transaction_id,
            client_secret=result.client_secret,
            amount_due=amount,
            charge=charge,
        )

    async def settle_extension(
        self, db: AsyncSession, booking: Booking, additional_charge: int
    ) -> PaymentFollowUp:
        """Collect the price of added hours; ``booking`` already carries the new totals."""
        if booking.payment_status != "paid":
            return await self.request_main_payment(booking, booking.total_price)
        return await self.add_charge(db, booking, "extension", additional_charge)

    async def settle_check_out(
        self, db: AsyncSession, booking: Booking, final_charge: int
    ) -> PaymentFollowUp:
        """Charge or refund the difference between what was collected and ``final_charge``."""
        if booking.payment_status != "paid":
            return await self.request_main_payment(booking, final_charge)

        charges = await self.get_charges(db, booking.id)
        # Unpaid extensions are folded into the final charge instead
        for charge in charges:
            if charge.payment_status != "pending":
                continue
            result = await gateway_service.cancel_payment(charge.payment_intent_id)
            if not result.success:
                return PaymentFollowUp(error=result.error_message or "Could not cancel open charge")
            charge.payment_status = "cancelled"

        difference = final_charge - self.captured_amount(booking, charges)
        if difference > 0:
            return await self.add_charge(db, booking, "overage", difference)
        if difference < 0:
            return await self.refund(
                booking, charges, -difference, f"Early check-out for booking {booking.confirmation_code}"
            )
        return PaymentFollowUp()

    async def refund(
        self, booking: Booking, charges: list[BookingCharge], amount: int, reason: str
    ) -> PaymentFollowUp:
        """Refund ``amount`` cents, from the main payment first, then paid charges."""
        sources = [(booking.payment_intent_id, self.main_payment_amount(booking, charges))]
        sources += [(c.payment_intent_id, c.amount) for c in charges if c.payment_status == "paid"]

        follow_up = PaymentFollowUp()
        remaining = amount
        for transaction_id, available in sources:
            portion = min(remaining, available)
            if not transaction_id or portion <= 0:
                continue
            result = await gateway_service.process_refund(
                transaction_id=transaction_id, amount=portion, reason=reason
            )
            if not result.success:
                logger.error(f"Refund failed for booking {booking.id}: {result.error_message}")
                follow_up.error = result.error_message or "Refund failed"
                break
            follow_up.refund_id = follow_up.refund_id or result.refund_id
            follow_up.refund_amount += portion
            remaining -= portion
            if remaining == 0:
                break

        if follow_up.refund_amount:
            booking.payment_status = "partially_refunded"
        return follow_up


# Singleton instance
booking_payment_service = BookingPaymentService()
