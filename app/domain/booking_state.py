"""Booking state machine."""

from app.core.exceptions import InvalidBookingStatus

BOOKING_TRANSITIONS = {
    "pending": {"confirmed", "checked_in", "cancelled"},
    "confirmed": {"checked_in", "cancelled"},
    "checked_in": {"completed"},
    "completed": set(),
    "cancelled": set(),
}

TERMINAL_STATES = {"completed", "cancelled"}


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidBookingStatus(
            f"Invalid booking transition: {current} to {target}",
            current_status=current,
        )
