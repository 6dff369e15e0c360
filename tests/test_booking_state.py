"""Booking state machine tests."""

import pytest

from app.core.exceptions import InvalidBookingStatus
from app.domain.booking_state import BOOKING_TRANSITIONS, assert_booking_transition, is_terminal


class TestBookingTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "confirmed"),
            ("pending", "checked_in"),
            ("pending", "cancelled"),
            ("confirmed", "checked_in"),
            ("confirmed", "cancelled"),
            ("checked_in", "completed"),
        ],
    )
    def test_allowed(self, current, target):
        assert_booking_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            ("checked_in", "cancelled"),
            ("confirmed", "completed"),
            ("completed", "checked_in"),
            ("cancelled", "confirmed"),
            ("unknown", "confirmed"),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidBookingStatus) as exc_info:
            assert_booking_transition(current, target)
        assert exc_info.value.current_status == current
        assert exc_info.value.code == "invalid_state"

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_terminal_states_have_no_exits(self, status):
        assert is_terminal(status)
        assert BOOKING_TRANSITIONS[status] == set()

    def test_only_check_in_enters_checked_in_from_live_states(self):
        sources = {s for s, targets in BOOKING_TRANSITIONS.items() if "checked_in" in targets}
        assert sources == {"pending", "confirmed"}
