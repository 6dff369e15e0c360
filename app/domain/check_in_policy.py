"""Check-in window policy.

- Check-in opens 15 minutes before the booked start time
- Check-in closes 60 minutes after the booked end time
"""

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from app.core.exceptions import CheckInExpired, CheckInTooEarly

EARLY_CHECK_IN_MINUTES = 15
LATE_CHECK_IN_MINUTES = 60


@dataclass(frozen=True)
class CheckInWindow:
    """Instants between which check-in is permitted (inclusive)."""

    booking_start: datetime
    booking_end: datetime
    opens_at: datetime
    closes_at: datetime


def booking_interval(
    booking_date: date,
    start_time: time,
    end_time: time,
    tz: tzinfo = UTC,
) -> tuple[datetime, datetime]:
    """Resolve wall-clock booking times to aware datetimes.

    An end time at or before the start time is read as the next day.
    """
    start = datetime.combine(booking_date, start_time, tzinfo=tz)
    end = datetime.combine(booking_date, end_time, tzinfo=tz)
    if end <= start:
        end += timedelta(days=1)
    return start, end


def get_check_in_window(
    booking_date: date,
    start_time: time,
    end_time: time,
    tz: tzinfo = UTC,
) -> CheckInWindow:
    """Calculate the check-in window for a booking."""
    start, end = booking_interval(booking_date, start_time, end_time, tz)
    return CheckInWindow(
        booking_start=start,
        booking_end=end,
        opens_at=start - timedelta(minutes=EARLY_CHECK_IN_MINUTES),
        closes_at=end + timedelta(minutes=LATE_CHECK_IN_MINUTES),
    )


def minutes_until(now: datetime, moment: datetime) -> int:
    """Whole minutes from ``now`` until ``moment``, rounded up."""
    return math.ceil((moment - now).total_seconds() / 60)


def assert_within_check_in_window(window: CheckInWindow, now: datetime) -> None:
    """Reject check-ins outside the window.

    Raises:
        CheckInTooEarly: ``now`` is before the window opens
        CheckInExpired: ``now`` is after the window closes
    """
    if now < window.opens_at:
        raise CheckInTooEarly(minutes_until(now, window.opens_at))
    if now > window.closes_at:
        raise CheckInExpired()
