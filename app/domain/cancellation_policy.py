"""Guest cancellation policy.

A booking may be cancelled by its guest while it is unpaid and the stay
starts at least ``notice_days`` days from today (48 hours by default).
Paid bookings go through support.
"""

from datetime import date

from app.config import settings
from app.core.exceptions import InvalidStateError, PolicyError
from app.domain.booking_state import BookingStatus, assert_booking_transition


def days_until_check_in(check_in_date: date, today: date) -> int:
    return (check_in_date - today).days


def assert_guest_can_cancel(
    status: BookingStatus,
    check_in_date: date,
    today: date,
    notice_days: int | None = None,
) -> None:
    """Validate a guest cancellation.

    Raises:
        InvalidStateError: booking is paid or already cancelled
        PolicyError: check-in is inside the notice window
    """
    if notice_days is None:
        notice_days = settings.cancellation_notice_days

    if status == BookingStatus.PAID:
        raise InvalidStateError("Paid bookings can only be cancelled by contacting support")
    assert_booking_transition(status, BookingStatus.CANCELLED)

    if days_until_check_in(check_in_date, today) < notice_days:
        raise PolicyError(
            f"Cancellation requires {notice_days * 24}h notice before check-in"
        )

