"""Booking confirmation code generation."""

import random
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

CONFIRMATION_CODE_LENGTH = 8


def random_confirmation_code() -> str:
    """Eight uppercase alphanumeric characters, e.g. 'K3B7Q9ZA'."""
    chars = string.ascii_uppercase + string.digits
    return "".join(random.choices(chars, k=CONFIRMATION_CODE_LENGTH))


async def generate_confirmation_code(db: AsyncSession) -> str:
    """Generate a confirmation code not yet used by any booking.

    Args:
        db: Database session for uniqueness check

    Returns:
        str: Unique confirmation code
    """
    from app.models.booking import Booking

    while True:
        code = random_confirmation_code()

        # Check uniqueness
        result = await db.execute(
            select(Booking.id).where(Booking.confirmation_code == code)
        )
        if not result.scalar_one_or_none():
            return code
