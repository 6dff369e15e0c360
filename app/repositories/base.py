"""Booking storage interface.

Lifecycle rules live in app.services.booking_lifecycle_service; adapters
only read and write records.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from app.models.booking import Booking


class BookingRepository(ABC):
    """Abstract storage for booking records.

    Implementations raise ``StorageError`` when the store is unreachable.
    """

    @abstractmethod
    async def get_booking_by_id(self, booking_id: UUID) -> Booking | None:
        """Fetch a booking with its workspace loaded, or None."""
        pass

    @abstractmethod
    async def get_active_booking(self, user_id: UUID) -> Booking | None:
        """Fetch the user's checked-in, not checked-out booking, if any."""
        pass

    @abstractmethod
    async def check_in_booking(self, booking_id: UUID, timestamp: datetime) -> Booking | None:
        """Record a check-in if the booking has none yet.

        Returns:
            The updated booking, or None if another check-in won the race
        """
        pass

    @abstractmethod
    async def check_out_booking(
        self,
        booking_id: UUID,
        timestamp: datetime,
        actual_duration_hours: Decimal,
        final_charge: int,
    ) -> Booking | None:
        """Record a check-out if the booking has none yet.

        Returns:
            The updated booking, or None if another check-out won the race
        """
        pass
