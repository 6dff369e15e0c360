"""Pricing engine shared by bookings and café orders.

CRITICAL BUSINESS LOGIC:
- All amounts are integer cents; rounding goes through app.utils.money
- NFT holders get 10% off café orders and 50% off workspace time
- A booking's estimate (subtotal + processing fee) is fixed at creation
- At check-out the estimate is re-priced by actual usage at the booked
  hourly rate, giving either an overage charge or a refund
- Usage within one minute of the booked duration keeps the estimate
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from app.core.exceptions import ValidationError
from app.utils.money import calculate_processing_fee, format_price, round_cents, to_decimal

CAFE_NFT_DISCOUNT_RATE = Decimal("0.10")
WORKSPACE_NFT_DISCOUNT_RATE = Decimal("0.50")

DURATION_MATCH_TOLERANCE_HOURS = Decimal(1) / Decimal(60)
MIN_ACTUAL_DURATION_HOURS = Decimal("0.01")
HOURS_PRECISION = Decimal("0.01")


class LineItem(Protocol):
    unit_price: int
    quantity: int


@dataclass(frozen=True)
class CartTotals:
    """Subtotal, loyalty discount and total of a cart, in cents."""

    subtotal: int
    discount: int
    total: int
    nft_discount_applied: bool


@dataclass(frozen=True)
class BookingEstimate:
    """Charge estimate fixed on a booking at creation time."""

    hourly_rate: int
    duration_hours: Decimal
    base_amount: int
    discount_amount: int
    subtotal: int
    nft_discount_applied: bool
    processing_fee: int
    total_price: int


@dataclass(frozen=True)
class PricingResult:
    """Outcome of re-pricing a booking by actual usage at check-out."""

    estimated_charge: int
    actual_charge: int
    final_charge: int
    overage_charge: int
    refund_amount: int
    description: str

    @property
    def requires_additional_payment(self) -> bool:
        return self.overage_charge > 0

    @property
    def requires_refund(self) -> bool:
        return self.refund_amount > 0


def calculate_nft_discount(amount: int, rate: Decimal, nft_holder: bool) -> int:
    """Loyalty discount on ``amount`` cents, zero for non-holders."""
    if not nft_holder:
        return 0
    return round_cents(Decimal(amount) * rate)


def compute_cart_totals(items: Iterable[LineItem], nft_holder: bool) -> CartTotals:
    """Calculate café cart totals.

    The discount is always derived from the subtotal passed in, never
    carried over from an earlier calculation.

    Args:
        items: Line items with ``unit_price`` (cents) and ``quantity``
        nft_holder: Whether the customer gets the 10% loyalty discount

    Returns:
        CartTotals: subtotal, discount and total in cents
    """
    subtotal = 0
    for item in items:
        if item.quantity < 0 or item.unit_price < 0:
            raise ValueError("Line items cannot have a negative price or quantity")
        subtotal += item.unit_price * item.quantity

    discount = calculate_nft_discount(subtotal, CAFE_NFT_DISCOUNT_RATE, nft_holder)
    return CartTotals(
        subtotal=subtotal,
        discount=discount,
        total=subtotal - discount,
        nft_discount_applied=nft_holder,
    )


def calculate_booking_estimate(
    hourly_rate: int,
    duration_hours: Decimal | int | str,
    nft_holder: bool,
) -> BookingEstimate:
    """Calculate the estimate stored on a new booking.

    - base_amount = hourly_rate * duration_hours
    - subtotal = base_amount - 50% NFT discount (holders only)
    - processing_fee = 2.9% of subtotal + 30 cents
    - total_price = subtotal + processing_fee

    Args:
        hourly_rate: Workspace price per hour in cents
        duration_hours: Booked duration
        nft_holder: Whether the booking user holds the NFT

    Returns:
        BookingEstimate: All estimate amounts in cents
    """
    hours = to_decimal(duration_hours)
    if hours <= 0:
        raise ValueError("Booking duration must be positive")

    base_amount = round_cents(Decimal(hourly_rate) * hours)
    discount_amount = calculate_nft_discount(base_amount, WORKSPACE_NFT_DISCOUNT_RATE, nft_holder)
    subtotal = base_amount - discount_amount
    processing_fee = calculate_processing_fee(subtotal)

    return BookingEstimate(
        hourly_rate=hourly_rate,
        duration_hours=hours,
        base_amount=base_amount,
        discount_amount=discount_amount,
        subtotal=subtotal,
        nft_discount_applied=nft_holder,
        processing_fee=processing_fee,
        total_price=subtotal + processing_fee,
    )


def calculate_final_charge(
    booked_duration_hours: Decimal | int | str,
    actual_duration_hours: Decimal | int | str,
    subtotal: int,
    processing_fee: int,
    nft_discount_applied: bool = False,
) -> PricingResult:
    """Re-price a booking by the time actually used.

    The hourly rate is the booking's own estimate divided by its booked
    hours, so any discount baked into ``subtotal`` at creation carries
    through; ``nft_discount_applied`` is never used to discount again.

    Args:
        booked_duration_hours: Duration booked, strictly positive
        actual_duration_hours: Duration from check-in to check-out
        subtotal: Estimated subtotal in cents
        processing_fee: Estimated processing fee in cents
        nft_discount_applied: Whether ``subtotal`` already has the NFT discount

    Returns:
        PricingResult: Final charge with exactly one of overage/refund set
        when usage differs from the booking

    Raises:
        ValueError: If the booked duration is not positive or actual usage
            is negative
    """
    booked = to_decimal(booked_duration_hours)
    actual = to_decimal(actual_duration_hours)
    if booked <= 0:
        raise ValueError("Booked duration must be positive")
    if actual < 0:
        raise ValueError("Actual duration cannot be negative")

    estimated_charge = subtotal + processing_fee

    if abs(actual - booked) < DURATION_MATCH_TOLERANCE_HOURS:
        return PricingResult(
            estimated_charge=estimated_charge,
            actual_charge=estimated_charge,
            final_charge=estimated_charge,
            overage_charge=0,
            refund_amount=0,
            description="Used full booked time",
        )

    rate_per_hour = Decimal(estimated_charge) / booked
    actual_charge = round_cents(rate_per_hour * actual)
    rate_note = " at NFT holder rate" if nft_discount_applied else ""

    # Outside the tolerance the charge moves by at least one cent
    if actual > booked:
        actual_charge = max(actual_charge, estimated_charge + 1)
        overage_charge = actual_charge - estimated_charge
        return PricingResult(
            estimated_charge=estimated_charge,
            actual_charge=actual_charge,
            final_charge=actual_charge,
            overage_charge=overage_charge,
            refund_amount=0,
            description=(
                f"Stayed {actual - booked:.2f} hours longer, "
                f"additional {format_price(overage_charge)} charged{rate_note}"
            ),
        )

    actual_charge = min(actual_charge, estimated_charge - 1)
    refund_amount = estimated_charge - actual_charge
    return PricingResult(
        estimated_charge=estimated_charge,
        actual_charge=actual_charge,
        final_charge=actual_charge,
        overage_charge=0,
        refund_amount=refund_amount,
        description=(
            f"Left {booked - actual:.2f} hours early, "
            f"{format_price(refund_amount)} refund due{rate_note}"
        ),
    )


def calculate_duration_hours(start_time: time, end_time: time) -> Decimal:
    """Booked duration between two wall-clock times, wrapping past midnight."""
    start_minutes = start_time.hour * 60 + start_time.minute
    end_minutes = end_time.hour * 60 + end_time.minute

    duration_minutes = end_minutes - start_minutes
    if duration_minutes < 0:
        duration_minutes += 24 * 60

    return (Decimal(duration_minutes) / Decimal(60)).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def calculate_actual_duration(check_in_time: datetime, check_out_time: datetime) -> Decimal:
    """Elapsed hours between check-in and check-out.

    Rounded to 0.01 hours and never below 0.01, so the check-out rate
    stays well-defined even for an immediate check-out.
    """
    elapsed_seconds = Decimal(str((check_out_time - check_in_time).total_seconds()))
    hours = (elapsed_seconds / Decimal(3600)).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)
    return max(hours, MIN_ACTUAL_DURATION_HOURS)


def validate_booking_duration(
    duration_hours: Decimal,
    min_duration: Decimal,
    max_duration: Decimal,
) -> None:
    """Check a requested duration against a workspace's bounds.

    Raises:
        ValidationError: If the duration is zero or out of bounds
    """
    if duration_hours <= 0:
        raise ValidationError("Booking end time must be after start time")
    if duration_hours < min_duration:
        raise ValidationError(f"Minimum booking duration is {min_duration} hours")
    if duration_hours > max_duration:
        raise ValidationError(f"Maximum booking duration is {max_duration} hours")
