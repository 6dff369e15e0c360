"""Check-in window tests."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.core.exceptions import CheckInExpired, CheckInTooEarly
from app.domain.check_in_policy import (
    assert_within_check_in_window,
    booking_interval,
    get_check_in_window,
    minutes_until,
)

BOOKING_DATE = date(2026, 3, 10)
START = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
def window():
    return get_check_in_window(BOOKING_DATE, time(9, 0), time(11, 0))


class TestCheckInWindow:
    def test_bounds(self, window):
        assert window.opens_at == START - timedelta(minutes=15)
        assert window.closes_at == START + timedelta(hours=2, minutes=60)

    def test_too_early_twenty_minutes_before(self, window):
        with pytest.raises(CheckInTooEarly) as exc_info:
            assert_within_check_in_window(window, START - timedelta(minutes=20))
        assert exc_info.value.minutes_remaining == 5
        assert exc_info.value.detail == "Check-in available in 5 minutes"

    def test_minutes_remaining_rounds_up(self, window):
        with pytest.raises(CheckInTooEarly) as exc_info:
            assert_within_check_in_window(window, START - timedelta(minutes=15, seconds=1))
        assert exc_info.value.minutes_remaining == 1

    @pytest.mark.parametrize(
        "offset",
        [timedelta(minutes=-15), timedelta(0), timedelta(hours=1), timedelta(hours=3)],
    )
    def test_open(self, window, offset):
        assert_within_check_in_window(window, START + offset)

    def test_expired_after_late_window(self, window):
        with pytest.raises(CheckInExpired):
            assert_within_check_in_window(window, START + timedelta(hours=3, seconds=1))


class TestBookingInterval:
    def test_end_before_start_is_next_day(self):
        start, end = booking_interval(BOOKING_DATE, time(22, 0), time(1, 0))
        assert end - start == timedelta(hours=3)
        assert end.date() == date(2026, 3, 11)

    def test_site_timezone(self):
        tz = ZoneInfo("America/Los_Angeles")
        start, _ = booking_interval(BOOKING_DATE, time(9, 0), time(10, 0), tz)
        # PDT (UTC-7) is in effect on 10 March 2026
        assert start.astimezone(UTC) == datetime(2026, 3, 10, 16, 0, tzinfo=UTC)

    def test_minutes_until(self):
        assert minutes_until(START, START + timedelta(seconds=61)) == 2
        assert minutes_until(START, START) == 0
