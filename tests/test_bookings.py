import logging
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PaymentError,
    PaymentProviderError,
    PolicyError,
    ValidationError,
)
from app.domain.booking_state import BookingStatus

JUNE_10 = date(2030, 6, 10)
JUNE_12 = date(2030, 6, 12)


@pytest.fixture
async def checkout(booking_service, guest, room):
    return await booking_service.create_checkout(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))


async def test_direct_booking_blocks_overlapping_stays(booking_service, availability, guest, room):
    assert await availability.is_room_available(room.id, JUNE_10, JUNE_12)

    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    assert booking.status == BookingStatus.PENDING
    assert not await availability.is_room_available(room.id, date(2030, 6, 11), date(2030, 6, 13))


async def test_overlapping_booking_is_refused(booking_service, repository, guest, other_guest, room):
    await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    with pytest.raises(ConflictError):
        await booking_service.create_booking(
            other_guest, room.id, JUNE_12, date(2030, 6, 14), Decimal("240")
        )
    assert len(repository.bookings) == 1


async def test_booking_unknown_room(booking_service, guest):
    with pytest.raises(NotFoundError):
        await booking_service.create_booking(guest, uuid4(), JUNE_10, JUNE_12, Decimal("240"))


async def test_booking_requires_positive_price(booking_service, guest, room):
    with pytest.raises(ValidationError):
        await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("-1"))


async def test_checkout_creates_pending_booking_with_session(checkout, gateway, guest):
    booking, session = checkout

    assert booking.status == BookingStatus.PENDING
    assert booking.user_id == guest.user_id
    assert booking.payment_session_id == session.session_id
    assert f"booking_id={booking.id}" in session.redirect_url
    assert gateway.sessions[session.session_id].amount == Decimal("240")


async def test_checkout_provider_failure_leaves_no_booking(booking_service, repository, gateway, guest, room):
    gateway.available = False

    with pytest.raises(PaymentProviderError):
        await booking_service.create_checkout(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))
    assert repository.bookings == {}


async def test_confirm_paid_session_marks_booking_paid(checkout, booking_service, gateway, guest):
    booking, session = checkout
    gateway.mark_paid(session.session_id)

    confirmed = await booking_service.confirm_payment(guest, booking.id, session.session_id)

    assert confirmed.status == BookingStatus.PAID
    assert confirmed.paid_at is not None


async def test_confirm_twice_is_idempotent(checkout, booking_service, gateway, guest):
    booking, session = checkout
    gateway.mark_paid(session.session_id)
    await booking_service.confirm_payment(guest, booking.id, session.session_id)

    # Provider is not consulted again
    gateway.available = False
    again = await booking_service.confirm_payment(guest, booking.id, session.session_id)

    assert again.status == BookingStatus.PAID


async def test_confirm_unpaid_session_is_refused(checkout, booking_service, guest):
    booking, session = checkout

    with pytest.raises(PaymentError, match="not been completed"):
        await booking_service.confirm_payment(guest, booking.id, session.session_id)
    assert booking.status == BookingStatus.PENDING


async def test_confirm_session_unknown_to_provider_is_refused(checkout, booking_service, gateway, guest):
    booking, session = checkout
    del gateway.sessions[session.session_id]

    with pytest.raises(PaymentError, match="not found"):
        await booking_service.confirm_payment(guest, booking.id, session.session_id)
    assert booking.status == BookingStatus.PENDING


async def test_confirm_with_session_of_another_booking(checkout, booking_service, gateway, guest):
    booking, _ = checkout

    with pytest.raises(ValidationError):
        await booking_service.confirm_payment(guest, booking.id, "manual_other")


async def test_paid_session_cannot_pay_another_booking(booking_service, gateway, guest, room):
    cheap, session = await booking_service.create_checkout(
        guest, room.id, JUNE_10, JUNE_12, Decimal("1.00")
    )
    gateway.mark_paid(session.session_id)
    expensive = await booking_service.create_booking(
        guest, room.id, date(2030, 9, 1), date(2030, 9, 3), Decimal("900.00")
    )

    with pytest.raises(ValidationError, match="No payment session"):
        await booking_service.confirm_payment(guest, expensive.id, session.session_id)
    assert expensive.status == BookingStatus.PENDING
    assert expensive.payment_session_id is None
    assert cheap.status == BookingStatus.PENDING


async def test_booking_checkout_charges_booking_price(booking_service, gateway, guest, room):
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("310"))

    paid, session = await booking_service.create_booking_checkout(guest, booking.id)

    assert paid.id == booking.id
    assert paid.payment_session_id == session.session_id
    assert gateway.sessions[session.session_id].booking_id == booking.id
    assert gateway.sessions[session.session_id].amount == Decimal("310")

    gateway.mark_paid(session.session_id)
    confirmed = await booking_service.confirm_payment(guest, booking.id, session.session_id)
    assert confirmed.status == BookingStatus.PAID


async def test_booking_checkout_only_once(checkout, booking_service, gateway, guest):
    booking, _ = checkout

    with pytest.raises(ConflictError, match="already open"):
        await booking_service.create_booking_checkout(guest, booking.id)
    assert len(gateway.sessions) == 1


async def test_booking_checkout_of_cancelled_booking(booking_service, guest, room):
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))
    await booking_service.cancel_booking(guest, booking.id, today=date(2030, 1, 1))

    with pytest.raises(InvalidStateError):
        await booking_service.create_booking_checkout(guest, booking.id)


async def test_booking_checkout_by_another_guest(booking_service, gateway, guest, other_guest, room):
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    with pytest.raises(AuthorizationError):
        await booking_service.create_booking_checkout(other_guest, booking.id)
    assert gateway.sessions == {}


async def test_checkout_store_failure_logs_orphaned_session(
    booking_service, repository, gateway, guest, room, monkeypatch, caplog
):
    async def rejecting_add_booking(booking):
        raise ConflictError("Room is not available for these dates")

    monkeypatch.setattr(repository, "add_booking", rejecting_add_booking)

    with pytest.raises(ConflictError):
        await booking_service.create_checkout(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    (session_id,) = gateway.sessions
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert any(session_id in r.getMessage() for r in errors)
    assert repository.bookings == {}


async def test_store_refuses_shared_payment_session(checkout, repository, booking_service, guest, room):
    booking, session = checkout
    other = await booking_service.create_booking(
        guest, room.id, date(2030, 9, 1), date(2030, 9, 3), Decimal("240")
    )
    other.payment_session_id = session.session_id

    with pytest.raises(ConflictError, match="already attached"):
        await repository.save(other)


async def test_confirm_provider_failure(checkout, booking_service, gateway, guest):
    booking, session = checkout
    gateway.available = False

    with pytest.raises(PaymentProviderError) as exc_info:
        await booking_service.confirm_payment(guest, booking.id, session.session_id)
    assert exc_info.value.status_code == 502
    assert booking.status == BookingStatus.PENDING


async def test_confirm_cancelled_booking_is_refused(checkout, booking_service, gateway, guest):
    booking, session = checkout
    await booking_service.cancel_booking(guest, booking.id, today=date(2030, 6, 1))
    gateway.mark_paid(session.session_id)

    with pytest.raises(InvalidStateError):
        await booking_service.confirm_payment(guest, booking.id, session.session_id)


async def test_confirm_by_another_guest_is_refused(checkout, booking_service, gateway, other_guest):
    booking, session = checkout
    gateway.mark_paid(session.session_id)

    with pytest.raises(AuthorizationError):
        await booking_service.confirm_payment(other_guest, booking.id, session.session_id)
    assert booking.status == BookingStatus.PENDING


async def test_cancel_with_enough_notice(booking_service, availability, guest, room):
    today = date(2030, 6, 7)
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    cancelled = await booking_service.cancel_booking(guest, booking.id, today=today)

    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancelled_at is not None
    assert await availability.is_room_available(room.id, JUNE_10, JUNE_12)


async def test_cancel_for_tomorrow_is_refused(booking_service, guest, room):
    today = date(2030, 6, 9)
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    with pytest.raises(PolicyError):
        await booking_service.cancel_booking(guest, booking.id, today=today)
    assert booking.status == BookingStatus.PENDING


async def test_cancel_uses_current_date_by_default(booking_service, guest, room):
    start = date.today() + timedelta(days=1)
    booking = await booking_service.create_booking(
        guest, room.id, start, start + timedelta(days=2), Decimal("240")
    )

    with pytest.raises(PolicyError):
        await booking_service.cancel_booking(guest, booking.id)


async def test_paid_booking_cannot_be_cancelled(checkout, booking_service, gateway, guest):
    booking, session = checkout
    gateway.mark_paid(session.session_id)
    await booking_service.confirm_payment(guest, booking.id, session.session_id)

    with pytest.raises(InvalidStateError, match="contacting support"):
        await booking_service.cancel_booking(guest, booking.id, today=date(2030, 1, 1))
    assert booking.status == BookingStatus.PAID


async def test_cancel_twice_is_refused(booking_service, guest, room):
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))
    await booking_service.cancel_booking(guest, booking.id, today=date(2030, 1, 1))

    with pytest.raises(InvalidStateError):
        await booking_service.cancel_booking(guest, booking.id, today=date(2030, 1, 1))


async def test_cancel_by_another_guest_is_refused(booking_service, guest, other_guest, room):
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    with pytest.raises(AuthorizationError):
        await booking_service.cancel_booking(other_guest, booking.id, today=date(2030, 1, 1))
    assert booking.status == BookingStatus.PENDING


async def test_list_bookings_latest_stay_first(booking_service, guest, other_guest, room):
    early = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))
    late = await booking_service.create_booking(
        guest, room.id, date(2030, 9, 1), date(2030, 9, 3), Decimal("240")
    )
    await booking_service.create_booking(
        other_guest, room.id, date(2030, 10, 1), date(2030, 10, 2), Decimal("120")
    )

    listed = await booking_service.list_bookings(guest)
    assert [b.id for b in listed] == [late.id, early.id]


async def test_get_booking_is_owner_only(booking_service, guest, other_guest, room):
    booking = await booking_service.create_booking(guest, room.id, JUNE_10, JUNE_12, Decimal("240"))

    assert (await booking_service.get_booking(guest, booking.id)).id == booking.id
    with pytest.raises(AuthorizationError):
        await booking_service.get_booking(other_guest, booking.id)
