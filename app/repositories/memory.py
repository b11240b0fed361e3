"""In-memory repository.

Implements the same contract as the SQL repository, including the
per-room serialization and the store-level booking constraints, so the
services can run without a database (tests, local demos).
"""

import asyncio
import uuid
from collections import defaultdict
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from app.core.exceptions import ConflictError
from app.domain.availability import ranges_overlap
from app.domain.booking_state import BookingStatus
from app.domain.negotiation_state import ACTIVE_NEGOTIATION_STATUSES, NegotiationStatus
from app.models.booking import Booking
from app.models.hotel import Hotel, Room
from app.models.negotiation import Negotiation
from app.models.user import User
from app.repositories.base import StayRepository


class InMemoryRepository(StayRepository):
    """Dictionary-backed store with one asyncio lock per room."""

    def __init__(self):
        self.users: dict[UUID, User] = {}
        self.hotels: dict[UUID, Hotel] = {}
        self.rooms: dict[UUID, Room] = {}
        self.bookings: dict[UUID, Booking] = {}
        self.negotiations: dict[UUID, Negotiation] = {}
        self._managers: set[tuple[UUID, UUID]] = set()
        self._room_locks: defaultdict[UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    # Seeding helpers (hotel and room CRUD lives outside this service)

    def add_user(self, email: str, role: str = "guest", **fields) -> User:
        user = User(id=uuid.uuid4(), email=email, role=role, **fields)
        self.users[user.id] = user
        return user

    def add_hotel(self, name: str, **fields) -> Hotel:
        hotel = Hotel(id=uuid.uuid4(), name=name, **fields)
        self.hotels[hotel.id] = hotel
        return hotel

    def add_room(self, hotel: Hotel, name: str, price: Decimal | int | str, **fields) -> Room:
        room = Room(id=uuid.uuid4(), hotel_id=hotel.id, name=name, price=Decimal(str(price)), **fields)
        self.rooms[room.id] = room
        return room

    def add_manager(self, user: User, hotel: Hotel) -> None:
        self._managers.add((user.id, hotel.id))

    # Contract

    @asynccontextmanager
    async def room_transaction(self, room_id: UUID) -> AsyncIterator[None]:
        async with self._room_locks[room_id]:
            yield

    async def get_user(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    async def get_managed_hotel_ids(self, user_id: UUID) -> frozenset[UUID]:
        return frozenset(hotel_id for uid, hotel_id in self._managers if uid == user_id)

    async def get_room(self, room_id: UUID) -> Room | None:
        return self.rooms.get(room_id)

    async def get_booking(self, booking_id: UUID) -> Booking | None:
        return self.bookings.get(booking_id)

    async def get_negotiation(self, negotiation_id: UUID) -> Negotiation | None:
        return self.negotiations.get(negotiation_id)

    async def find_overlapping_bookings(
        self, room_id: UUID, start_date: date, end_date: date
    ) -> list[Booking]:
        return [
            b
            for b in self.bookings.values()
            if b.room_id == room_id
            and b.status != BookingStatus.CANCELLED
            and ranges_overlap(b.start_date, b.end_date, start_date, end_date)
        ]

    async def find_overlapping_negotiations(
        self,
        room_id: UUID,
        start_date: date,
        end_date: date,
        statuses: Iterable[NegotiationStatus],
        user_id: UUID | None = None,
    ) -> list[Negotiation]:
        wanted = set(statuses)
        return [
            n
            for n in self.negotiations.values()
            if n.room_id == room_id
            and n.status in wanted
            and (user_id is None or n.user_id == user_id)
            and ranges_overlap(n.start_date, n.end_date, start_date, end_date)
        ]

    async def add_booking(self, booking: Booking) -> Booking:
        if booking.id is None:
            booking.id = uuid.uuid4()
        if booking.created_at is None:
            booking.created_at = booking.updated_at = datetime.now(UTC)

        # Same guarantees as the unique constraints and exclusion constraint
        if booking.negotiation_id is not None and any(
            b.negotiation_id == booking.negotiation_id for b in self.bookings.values()
        ):
            raise ConflictError("A booking already exists for this negotiation")
        self._check_session_unique(booking)
        if booking.status != BookingStatus.CANCELLED and await self.find_overlapping_bookings(
            booking.room_id, booking.start_date, booking.end_date
        ):
            raise ConflictError("Room is not available for these dates")

        self.bookings[booking.id] = booking
        return booking

    async def add_negotiation(self, negotiation: Negotiation) -> Negotiation:
        if negotiation.id is None:
            negotiation.id = uuid.uuid4()
        if negotiation.created_at is None:
            negotiation.created_at = negotiation.updated_at = datetime.now(UTC)
        self.negotiations[negotiation.id] = negotiation
        return negotiation

    async def save(self, entity: Booking | Negotiation) -> None:
        # Entities are stored by reference; changes are already visible
        if isinstance(entity, Booking):
            self._check_session_unique(entity)

    def _check_session_unique(self, booking: Booking) -> None:
        if booking.payment_session_id is not None and any(
            b.payment_session_id == booking.payment_session_id and b.id != booking.id
            for b in self.bookings.values()
        ):
            raise ConflictError("Payment session is already attached to another booking")

    async def list_bookings_for_guest(self, user_id: UUID) -> list[Booking]:
        bookings = [b for b in self.bookings.values() if b.user_id == user_id]
        return sorted(bookings, key=lambda b: b.start_date, reverse=True)

    async def list_negotiations_for_guest(
        self, user_id: UUID, status: NegotiationStatus | None = None
    ) -> list[Negotiation]:
        negotiations = [
            n
            for n in self.negotiations.values()
            if n.user_id == user_id and (status is None or n.status == status)
        ]
        return sorted(negotiations, key=lambda n: n.created_at, reverse=True)

    async def list_negotiations_for_hotel(
        self, hotel_id: UUID, status: NegotiationStatus | None = None
    ) -> list[Negotiation]:
        negotiations = [
            n
            for n in self.negotiations.values()
            if self.rooms[n.room_id].hotel_id == hotel_id
            and (status is None or n.status == status)
        ]
        negotiations.sort(key=lambda n: n.created_at, reverse=True)
        negotiations.sort(key=lambda n: n.status not in ACTIVE_NEGOTIATION_STATUSES)
        return negotiations
