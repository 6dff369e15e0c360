"""Currency conversion and processing-fee helpers.

All amounts stored in the database or sent to a payment gateway are
integer cents. Amounts shown to people are dollars with two decimal
places. Every conversion between the two goes through this module, and
every rounding uses ROUND_HALF_UP on Decimal (half away from zero), so
there is exactly one rounding rule in the system.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

# Card processing fee: 2.9% + 30 cents
PROCESSING_FEE_PERCENTAGE = Decimal("0.029")
PROCESSING_FEE_FIXED_CENTS = Decimal("30")

CENTS_PER_DOLLAR = Decimal("100")
ONE_CENT = Decimal("0.01")


def to_decimal(amount: Decimal | int | float | str) -> Decimal:
    """Coerce a numeric amount to Decimal.

    Floats go through ``str`` so ``1.005`` is read as the literal that was
    written, not its binary approximation.
    """
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def round_cents(amount: Decimal | int | float | str) -> int:
    """Round a (possibly fractional) cent amount to a whole cent."""
    return int(to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def dollars_to_cents(amount: Decimal | int | float | str) -> int:
    """Convert dollars to integer cents.

    Args:
        amount: Dollar amount (e.g. ``Decimal("10.99")``)

    Returns:
        int: Amount in cents (e.g. 1099)
    """
    return round_cents(to_decimal(amount) * CENTS_PER_DOLLAR)


def cents_to_dollars(cents: int) -> Decimal:
    """Convert integer cents to dollars with two decimal places."""
    return (Decimal(cents) / CENTS_PER_DOLLAR).quantize(ONE_CENT, rounding=ROUND_HALF_UP)


def cents_field_to_dollars(value: Any) -> Any:
    """Before-validator for API money fields: integer cents become dollars.

    Other values (already dollars, or None) are left for field validation.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return cents_to_dollars(value)
    return value


def calculate_processing_fee(amount: Decimal | int | float | str) -> int:
    """Calculate the card processing fee for a charge.

    The fixed 30 cent component is unconditional, so a zero charge still
    costs 30 cents.

    Args:
        amount: Charge amount in cents

    Returns:
        int: Fee in cents
    """
    fee = to_decimal(amount) * PROCESSING_FEE_PERCENTAGE + PROCESSING_FEE_FIXED_CENTS
    return round_cents(fee)


def format_price(cents: int) -> str:
    """Format a cent amount for display, e.g. ``$10.44``."""
    return f"${cents_to_dollars(cents):.2f}"
