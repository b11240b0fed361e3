"""Booking state machine.

States: PENDING → PAID | CANCELLED. Both PAID and CANCELLED are terminal.
"""

from enum import Enum

from app.core.exceptions import InvalidStateError, ValidationError


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: "str | BookingStatus") -> "BookingStatus":
        """Normalize a raw status string, whatever its case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown booking status: {value}")


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.PAID, BookingStatus.CANCELLED},
    BookingStatus.PAID: set(),
    BookingStatus.CANCELLED: set(),
}

# Statuses that hold the room's dates
BLOCKING_BOOKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.PAID})


def assert_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidStateError(
            f"Invalid booking transition: {current.value} → {target.value}"
        )
