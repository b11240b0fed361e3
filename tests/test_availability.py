from datetime import date
from decimal import Decimal

from app.domain.negotiation_state import NegotiationStatus


async def test_room_without_bookings_is_available(availability, room):
    report = await availability.check_availability(room.id, date(2030, 7, 10), date(2030, 7, 12))

    assert report.available
    assert report.conflicting_bookings == 0
    assert report.conflicting_negotiations == 0


async def test_booking_blocks_adjacent_stay_sharing_a_day(availability, booking_service, guest, room):
    await booking_service.create_booking(
        guest, room.id, date(2030, 7, 10), date(2030, 7, 12), Decimal("240")
    )

    assert not await availability.is_room_available(room.id, date(2030, 7, 12), date(2030, 7, 14))
    assert await availability.is_room_available(room.id, date(2030, 7, 13), date(2030, 7, 14))


async def test_cancelled_booking_frees_the_dates(availability, booking_service, guest, room):
    booking = await booking_service.create_booking(
        guest, room.id, date(2030, 7, 10), date(2030, 7, 12), Decimal("240")
    )
    await booking_service.cancel_booking(guest, booking.id, today=date(2030, 7, 1))

    assert await availability.is_room_available(room.id, date(2030, 7, 10), date(2030, 7, 12))


async def test_pending_negotiation_does_not_block(availability, negotiation_service, guest, room):
    await negotiation_service.create_negotiation(
        guest, room.id, Decimal("200"), date(2030, 7, 10), date(2030, 7, 12)
    )

    report = await availability.check_availability(room.id, date(2030, 7, 10), date(2030, 7, 12))
    assert report.available


async def test_accepted_negotiation_is_counted(availability, repository, negotiation_service, guest, room):
    negotiation = await negotiation_service.create_negotiation(
        guest, room.id, Decimal("200"), date(2030, 7, 10), date(2030, 7, 12)
    )
    # Accepted without the booking it normally creates
    negotiation.status = NegotiationStatus.ACCEPTED

    report = await availability.check_availability(room.id, date(2030, 7, 11), date(2030, 7, 11))
    assert not report.available
    assert report.conflicting_bookings == 0
    assert report.conflicting_negotiations == 1


async def test_other_rooms_do_not_conflict(availability, booking_service, repository, hotel, guest, room):
    other_room = repository.add_room(hotel, "Garden single", price="80")
    await booking_service.create_booking(
        guest, room.id, date(2030, 7, 10), date(2030, 7, 12), Decimal("240")
    )

    assert await availability.is_room_available(other_room.id, date(2030, 7, 10), date(2030, 7, 12))
