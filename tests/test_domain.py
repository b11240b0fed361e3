from datetime import date

import pytest

from app.core.exceptions import InvalidStateError, PolicyError, ValidationError
from app.domain.availability import ranges_overlap, validate_date_range, validate_price
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.domain.cancellation_policy import assert_guest_can_cancel, days_until_check_in
from app.domain.negotiation_state import (
    NegotiationAction,
    NegotiationStatus,
    Party,
    required_party,
    resolve_action,
)


def test_ranges_sharing_a_boundary_day_overlap():
    assert ranges_overlap(date(2030, 1, 10), date(2030, 1, 12), date(2030, 1, 12), date(2030, 1, 14))


def test_disjoint_ranges_do_not_overlap():
    assert not ranges_overlap(
        date(2030, 1, 10), date(2030, 1, 12), date(2030, 1, 13), date(2030, 1, 14)
    )


def test_contained_range_overlaps():
    assert ranges_overlap(date(2030, 1, 1), date(2030, 1, 31), date(2030, 1, 10), date(2030, 1, 11))


def test_single_day_range_is_valid():
    validate_date_range(date(2030, 1, 10), date(2030, 1, 10))


def test_reversed_range_is_rejected():
    with pytest.raises(ValidationError):
        validate_date_range(date(2030, 1, 12), date(2030, 1, 10))


def test_missing_date_is_rejected():
    with pytest.raises(ValidationError):
        validate_date_range(None, date(2030, 1, 10))


@pytest.mark.parametrize("price", [None, 0, -5])
def test_invalid_price_is_rejected(price):
    with pytest.raises(ValidationError):
        validate_price(price)


def test_booking_status_parse_ignores_case():
    assert BookingStatus.parse("paid") == BookingStatus.PAID
    assert BookingStatus.parse(" Cancelled ") == BookingStatus.CANCELLED


def test_booking_status_parse_rejects_unknown_value():
    with pytest.raises(ValidationError):
        BookingStatus.parse("refunded")


def test_negotiation_status_parse_accepts_counter_spelling():
    assert NegotiationStatus.parse("counter") == NegotiationStatus.COUNTERED
    assert NegotiationStatus.parse("COUNTERED") == NegotiationStatus.COUNTERED
    assert NegotiationStatus.parse("Pending") == NegotiationStatus.PENDING


def test_terminal_booking_statuses_have_no_exit():
    for terminal in (BookingStatus.PAID, BookingStatus.CANCELLED):
        for target in BookingStatus:
            with pytest.raises(InvalidStateError):
                assert_booking_transition(terminal, target)


def test_pending_booking_can_be_paid_or_cancelled():
    assert_booking_transition(BookingStatus.PENDING, BookingStatus.PAID)
    assert_booking_transition(BookingStatus.PENDING, BookingStatus.CANCELLED)


def test_manager_actions_from_pending():
    assert resolve_action(NegotiationAction.ACCEPT, NegotiationStatus.PENDING) == (
        NegotiationStatus.ACCEPTED
    )
    assert resolve_action(NegotiationAction.REJECT, NegotiationStatus.PENDING) == (
        NegotiationStatus.REJECTED
    )
    assert resolve_action(NegotiationAction.COUNTER, NegotiationStatus.PENDING) == (
        NegotiationStatus.COUNTERED
    )


def test_manager_can_counter_again():
    assert resolve_action(NegotiationAction.COUNTER, NegotiationStatus.COUNTERED) == (
        NegotiationStatus.COUNTERED
    )


def test_accept_counter_requires_a_counter_offer():
    with pytest.raises(InvalidStateError, match="no counter-offer"):
        resolve_action(NegotiationAction.ACCEPT_COUNTER, NegotiationStatus.PENDING)
    assert resolve_action(NegotiationAction.ACCEPT_COUNTER, NegotiationStatus.COUNTERED) == (
        NegotiationStatus.ACCEPTED
    )


def test_accepted_negotiation_cannot_be_cancelled():
    with pytest.raises(InvalidStateError, match="accepted negotiation cannot be cancelled"):
        resolve_action(NegotiationAction.CANCEL, NegotiationStatus.ACCEPTED)


@pytest.mark.parametrize(
    "terminal",
    [NegotiationStatus.ACCEPTED, NegotiationStatus.REJECTED, NegotiationStatus.CANCELLED],
)
@pytest.mark.parametrize(
    "action", [NegotiationAction.ACCEPT, NegotiationAction.REJECT, NegotiationAction.COUNTER]
)
def test_terminal_negotiations_refuse_manager_actions(terminal, action):
    with pytest.raises(InvalidStateError):
        resolve_action(action, terminal)


def test_actions_are_bound_to_a_party():
    assert required_party(NegotiationAction.ACCEPT) == Party.MANAGER
    assert required_party(NegotiationAction.COUNTER) == Party.MANAGER
    assert required_party(NegotiationAction.ACCEPT_COUNTER) == Party.GUEST
    assert required_party(NegotiationAction.CANCEL) == Party.GUEST


def test_days_until_check_in():
    assert days_until_check_in(date(2030, 1, 12), date(2030, 1, 10)) == 2


def test_cancel_allowed_with_enough_notice():
    assert_guest_can_cancel(
        BookingStatus.PENDING, date(2030, 1, 13), today=date(2030, 1, 10), notice_days=2
    )


def test_cancel_allowed_exactly_at_notice_limit():
    assert_guest_can_cancel(
        BookingStatus.PENDING, date(2030, 1, 12), today=date(2030, 1, 10), notice_days=2
    )


def test_cancel_refused_inside_notice_window():
    with pytest.raises(PolicyError, match="48h"):
        assert_guest_can_cancel(
            BookingStatus.PENDING, date(2030, 1, 11), today=date(2030, 1, 10), notice_days=2
        )


def test_paid_booking_cancel_goes_through_support():
    with pytest.raises(InvalidStateError, match="contacting support"):
        assert_guest_can_cancel(
            BookingStatus.PAID, date(2030, 6, 1), today=date(2030, 1, 10), notice_days=2
        )


def test_cancelled_booking_cannot_be_cancelled_again():
    with pytest.raises(InvalidStateError):
        assert_guest_can_cancel(
            BookingStatus.CANCELLED, date(2030, 6, 1), today=date(2030, 1, 10), notice_days=2
        )
