"""SQLAlchemy booking storage."""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ActiveBookingConflict, StorageError
from app.models.booking import Booking
from app.repositories.base import BookingRepository

logger = logging.getLogger(__name__)


class SQLAlchemyBookingRepository(BookingRepository):
    """Booking storage on the request's database session.

    Check-in and check-out are conditional UPDATEs, so of two racing
    requests only one matches a row.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_booking_by_id(self, booking_id: UUID) -> Booking | None:
        query = (
            select(Booking)
            .options(selectinload(Booking.workspace))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load booking {booking_id}: {e}")
            raise StorageError() from e
        return result.scalar_one_or_none()

    async def get_active_booking(self, user_id: UUID) -> Booking | None:
        query = (
            select(Booking)
            .options(selectinload(Booking.workspace))
            .where(
                Booking.user_id == user_id,
                Booking.status == "checked_in",
                Booking.check_in_time.is_not(None),
                Booking.check_out_time.is_(None),
            )
            .limit(1)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load active booking for user {user_id}: {e}")
            raise StorageError() from e
        return result.scalar_one_or_none()

    async def check_in_booking(self, booking_id: UUID, timestamp: datetime) -> Booking | None:
        stmt = (
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.check_in_time.is_(None),
                Booking.status.in_(("pending", "confirmed")),
            )
            .values(check_in_time=timestamp, status="checked_in")
            .returning(Booking.id)
            .execution_options(synchronize_session=False)
        )
        return await self._conditional_update(stmt, booking_id)

    async def check_out_booking(
        self,
        booking_id: UUID,
        timestamp: datetime,
        actual_duration_hours: Decimal,
        final_charge: int,
    ) -> Booking | None:
        stmt = (
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.check_in_time.is_not(None),
                Booking.check_out_time.is_(None),
                Booking.status == "checked_in",
            )
            .values(
                check_out_time=timestamp,
                actual_duration_hours=actual_duration_hours,
                final_charge=final_charge,
                status="completed",
            )
            .returning(Booking.id)
            .execution_options(synchronize_session=False)
        )
        return await self._conditional_update(stmt, booking_id)

    async def _conditional_update(self, stmt, booking_id: UUID) -> Booking | None:
        try:
            result = await self.db.execute(stmt)
            updated_id = result.scalar_one_or_none()
            await self.db.flush()
        except IntegrityError as e:
            # Partial unique index: a concurrent check-in of another booking won
            logger.warning(f"Active booking constraint hit for booking {booking_id}: {e}")
            raise ActiveBookingConflict("another workspace") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to update booking {booking_id}: {e}")
            raise StorageError() from e

        if updated_id is None:
            return None
        return await self.get_booking_by_id(booking_id)
