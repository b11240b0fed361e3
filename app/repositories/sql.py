"""PostgreSQL repository on an async SQLAlchemy session."""

import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from sqlalchemy import Select, case, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.domain.booking_state import BookingStatus
from app.domain.negotiation_state import ACTIVE_NEGOTIATION_STATUSES, NegotiationStatus
from app.models.booking import Booking
from app.models.hotel import HotelManager, Room
from app.models.negotiation import Negotiation
from app.models.user import User
from app.repositories.base import StayRepository

logger = logging.getLogger(__name__)

# Constraint name -> message reported to the client
CONSTRAINT_MESSAGES = {
    "ex_bookings_room_dates": "Room is not available for these dates",
    "uq_bookings_negotiation_id": "A booking already exists for this negotiation",
    "uq_bookings_payment_session_id": "Payment session is already attached to another booking",
}


def conflict_message(error: IntegrityError) -> str:
    """Map a constraint violation to the conflict it stands for."""
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", "") or ""

    if not constraint_name and orig is not None:
        text = str(orig)
        constraint_name = next((name for name in CONSTRAINT_MESSAGES if name in text), "")

    return CONSTRAINT_MESSAGES.get(constraint_name, "Write conflicts with existing data")


def overlapping_bookings_query(room_id: UUID, start_date: date, end_date: date) -> Select:
    """Non-cancelled bookings of a room sharing at least one date with the range."""
    return select(Booking).where(
        Booking.room_id == room_id,
        Booking.status != BookingStatus.CANCELLED,
        Booking.start_date <= end_date,
        Booking.end_date >= start_date,
    )


def hotel_negotiations_query(hotel_id: UUID, status: NegotiationStatus | None = None) -> Select:
    query = (
        select(Negotiation)
        .join(Room, Room.id == Negotiation.room_id)
        .where(Room.hotel_id == hotel_id)
    )
    if status:
        query = query.where(Negotiation.status == status)

    # Active negotiations first
    active_first = case(
        (Negotiation.status.in_(list(ACTIVE_NEGOTIATION_STATUSES)), 0),
        else_=1,
    )
    return query.order_by(active_first, Negotiation.created_at.desc())


class SqlAlchemyRepository(StayRepository):
    """Repository backed by the request's database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def room_transaction(self, room_id: UUID) -> AsyncIterator[None]:
        """Run a block inside a savepoint holding the room row lock.

        The row lock lasts until the request transaction ends, so concurrent
        check-then-write sequences on the same room run one after another.
        """
        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    select(Room.id).where(Room.id == room_id).with_for_update()
                )
                yield
        except IntegrityError as e:
            logger.warning(f"Write on room {room_id} rejected by the store: {e.orig}")
            raise ConflictError(conflict_message(e)) from e

    async def get_user(self, user_id: UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_managed_hotel_ids(self, user_id: UUID) -> frozenset[UUID]:
        result = await self.db.execute(
            select(HotelManager.hotel_id).where(HotelManager.user_id == user_id)
        )
        return frozenset(result.scalars().all())

    async def get_room(self, room_id: UUID) -> Room | None:
        result = await self.db.execute(select(Room).where(Room.id == room_id))
        return result.scalar_one_or_none()

    async def get_booking(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_negotiation(self, negotiation_id: UUID) -> Negotiation | None:
        result = await self.db.execute(
            select(Negotiation)
            .where(Negotiation.id == negotiation_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_overlapping_bookings(
        self, room_id: UUID, start_date: date, end_date: date
    ) -> list[Booking]:
        result = await self.db.execute(overlapping_bookings_query(room_id, start_date, end_date))
        return list(result.scalars().all())

    async def find_overlapping_negotiations(
        self,
        room_id: UUID,
        start_date: date,
        end_date: date,
        statuses: Iterable[NegotiationStatus],
        user_id: UUID | None = None,
    ) -> list[Negotiation]:
        query = select(Negotiation).where(
            Negotiation.room_id == room_id,
            Negotiation.status.in_(list(statuses)),
            Negotiation.start_date <= end_date,
            Negotiation.end_date >= start_date,
        )
        if user_id is not None:
            query = query.where(Negotiation.user_id == user_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add_booking(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def add_negotiation(self, negotiation: Negotiation) -> Negotiation:
        self.db.add(negotiation)
        await self.db.flush()
        return negotiation

    async def save(self, entity: Booking | Negotiation) -> None:
        self.db.add(entity)
        await self.db.flush()

    async def list_bookings_for_guest(self, user_id: UUID) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.start_date.desc())
        )
        return list(result.scalars().all())

    async def list_negotiations_for_guest(
        self, user_id: UUID, status: NegotiationStatus | None = None
    ) -> list[Negotiation]:
        query = select(Negotiation).where(Negotiation.user_id == user_id)
        if status:
            query = query.where(Negotiation.status == status)
        result = await self.db.execute(query.order_by(Negotiation.created_at.desc()))
        return list(result.scalars().all())

    async def list_negotiations_for_hotel(
        self, hotel_id: UUID, status: NegotiationStatus | None = None
    ) -> list[Negotiation]:
        result = await self.db.execute(hotel_negotiations_query(hotel_id, status))
        return list(result.scalars().all())
