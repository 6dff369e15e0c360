"""Booking check-in / check-out lifecycle.

Lifecycle: pending/confirmed -> checked_in -> completed, or cancelled.
Check-in and check-out are the only operations that move a booking
into checked_in and completed; both are permitted once per booking.
At check-out the booking is re-priced by actual usage. This service
only computes what must be charged or refunded; moving money is the
caller's job.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from decimal import Decimal
from uuid import UUID

from app.core.exceptions import (
    ActiveBookingConflict,
    AlreadyProcessedError,
    AuthorizationError,
    InvalidBookingStatus,
    NotFoundError,
)
from app.core.permissions import AuthenticatedUser
from app.domain.booking_state import assert_booking_transition
from app.domain.check_in_policy import assert_within_check_in_window, get_check_in_window
from app.domain.pricing import PricingResult, calculate_actual_duration, calculate_final_charge
from app.models.booking import Booking
from app.repositories.base import BookingRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOutResult:
    """Completed booking with its usage and charge reconciliation."""

    booking: Booking
    booked_hours: Decimal
    actual_hours: Decimal
    initial_charge: int
    pricing: PricingResult

    @property
    def requires_additional_payment(self) -> bool:
        return self.pricing.requires_additional_payment

    @property
    def requires_refund(self) -> bool:
        return self.pricing.requires_refund


@dataclass(frozen=True)
class CostEstimate:
    """Charges for an active booking as if it were checked out now."""

    booking: Booking
    is_checked_out: bool
    booked_hours: Decimal
    hours_used: Decimal
    hours_remaining: Decimal
    is_overtime: bool
    initial_charge: int
    final_charge: int
    refund_amount: int
    overage_charge: int
    description: str
    message: str


def assert_booking_owner(booking: Booking, user: AuthenticatedUser, action: str) -> None:
    if not user.owns(booking.user_id):
        raise AuthorizationError(f"You do not have permission to {action} this booking")


def assert_can_check_in(booking: Booking) -> None:
    """Reject check-in for terminal or already checked-in bookings."""
    if booking.status == "cancelled":
        raise InvalidBookingStatus(
            "Cannot check in to a cancelled booking", current_status=booking.status
        )
    if booking.status == "completed":
        raise InvalidBookingStatus(
            "This booking has already been completed", current_status=booking.status
        )
    if booking.check_in_time is not None:
        raise AlreadyProcessedError("Already checked in to this booking")
    assert_booking_transition(booking.status, "checked_in")


def assert_no_other_active_booking(booking: Booking, active_booking: Booking | None) -> None:
    """A user may hold at most one checked-in booking at a time."""
    if active_booking is not None and active_booking.id != booking.id:
        workspace_name = (
            active_booking.workspace.name if active_booking.workspace else "another workspace"
        )
        raise ActiveBookingConflict(workspace_name)


def assert_can_check_out(booking: Booking) -> None:
    if booking.check_in_time is None:
        raise InvalidBookingStatus(
            "Must check in before checking out", current_status=booking.status
        )
    if booking.check_out_time is not None:
        raise AlreadyProcessedError("Already checked out from this booking")
    assert_booking_transition(booking.status, "completed")


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None:
        raise ValueError("Lifecycle operations require a timezone-aware timestamp")


class BookingLifecycleService:
    """Check-in, check-out and live cost estimates for bookings."""

    def __init__(self, repository: BookingRepository, site_timezone: tzinfo = UTC):
        self.repository = repository
        self.site_timezone = site_timezone

    async def _get_owned_booking(
        self, booking_id: UUID, user: AuthenticatedUser, action: str
    ) -> Booking:
        booking = await self.repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        assert_booking_owner(booking, user, action)
        return booking

    async def check_in(self, booking_id: UUID, user: AuthenticatedUser, now: datetime) -> Booking:
        """Check in to a booking.

        Args:
            booking_id: Booking to check in to
            user: Authenticated identity making the request
            now: Current instant (timezone-aware)

        Returns:
            Booking: The booking, now checked_in

        Raises:
            NotFoundError, AuthorizationError, InvalidBookingStatus,
            AlreadyProcessedError, ActiveBookingConflict, CheckInTooEarly,
            CheckInExpired, StorageError
        """
        _require_aware(now)
        booking = await self._get_owned_booking(booking_id, user, "check in to")
        assert_can_check_in(booking)

        active_booking = await self.repository.get_active_booking(user.id)
        assert_no_other_active_booking(booking, active_booking)

        window = get_check_in_window(
            booking.booking_date, booking.start_time, booking.end_time, self.site_timezone
        )
        assert_within_check_in_window(window, now)

        updated = await self.repository.check_in_booking(booking.id, now)
        if updated is None:
            logger.warning(f"Concurrent check-in lost for booking {booking.id}")
            raise AlreadyProcessedError("Already checked in to this booking")

        logger.info(f"Booking {booking.confirmation_code} checked in at {now.isoformat()}")
        return updated

    async def check_out(
        self, booking_id: UUID, user: AuthenticatedUser, now: datetime
    ) -> CheckOutResult:
        """Check out of a booking and reconcile the final charge.

        Raises:
            NotFoundError, AuthorizationError, InvalidBookingStatus,
            AlreadyProcessedError, StorageError
        """
        _require_aware(now)
        booking = await self._get_owned_booking(booking_id, user, "check out from")
        assert_can_check_out(booking)

        actual_hours = calculate_actual_duration(booking.check_in_time, now)
        pricing = calculate_final_charge(
            booked_duration_hours=booking.duration_hours,
            actual_duration_hours=actual_hours,
            subtotal=booking.subtotal,
            processing_fee=booking.processing_fee,
            nft_discount_applied=booking.nft_discount_applied,
        )

        updated = await self.repository.check_out_booking(
            booking.id, now, actual_hours, pricing.final_charge
        )
        if updated is None:
            logger.warning(f"Concurrent check-out lost for booking {booking.id}")
            raise AlreadyProcessedError("Already checked out from this booking")

        logger.info(
            f"Booking {booking.confirmation_code} checked out: "
            f"{actual_hours}h of {booking.duration_hours}h, final={pricing.final_charge} "
            f"overage={pricing.overage_charge} refund={pricing.refund_amount}"
        )
        return CheckOutResult(
            booking=updated,
            booked_hours=booking.duration_hours,
            actual_hours=actual_hours,
            initial_charge=booking.total_price,
            pricing=pricing,
        )

    async def estimate_current_charge(
        self, booking_id: UUID, user: AuthenticatedUser, now: datetime
    ) -> CostEstimate:
        """Show what check-out would charge right now, without changing anything."""
        _require_aware(now)
        booking = await self._get_owned_booking(booking_id, user, "view")
        if booking.check_in_time is None:
            raise InvalidBookingStatus(
                "Booking has not been checked in yet", current_status=booking.status
            )

        if booking.check_out_time is not None:
            final_charge = booking.final_charge if booking.final_charge is not None else booking.total_price
            return CostEstimate(
                booking=booking,
                is_checked_out=True,
                booked_hours=booking.duration_hours,
                hours_used=booking.actual_duration_hours or Decimal("0"),
                hours_remaining=Decimal("0"),
                is_overtime=False,
                initial_charge=booking.total_price,
                final_charge=final_charge,
                refund_amount=max(0, booking.total_price - final_charge),
                overage_charge=max(0, final_charge - booking.total_price),
                description="Booking is already checked out",
                message="Booking is already checked out",
            )

        hours_used = calculate_actual_duration(booking.check_in_time, now)
        pricing = calculate_final_charge(
            booked_duration_hours=booking.duration_hours,
            actual_duration_hours=hours_used,
            subtotal=booking.subtotal,
            processing_fee=booking.processing_fee,
            nft_discount_applied=booking.nft_discount_applied,
        )

        window = get_check_in_window(
            booking.booking_date, booking.start_time, booking.end_time, self.site_timezone
        )
        seconds_left = max(0.0, (window.booking_end - now).total_seconds())
        hours_remaining = (Decimal(str(seconds_left)) / Decimal(3600)).quantize(Decimal("0.1"))
        is_overtime = hours_used > booking.duration_hours

        if is_overtime:
            message = "You are currently in overtime. Additional charges will apply."
        elif hours_remaining > 0:
            message = f"You have {hours_remaining} hours remaining in your booking."
        else:
            message = "Your booking time is up. Please check out."

        return CostEstimate(
            booking=booking,
            is_checked_out=False,
            booked_hours=booking.duration_hours,
            hours_used=hours_used,
            hours_remaining=hours_remaining,
            is_overtime=is_overtime,
            initial_charge=booking.total_price,
            final_charge=pricing.final_charge,
            refund_amount=pricing.refund_amount,
            overage_charge=pricing.overage_charge,
            description=pricing.description,
            message=message,
        )
