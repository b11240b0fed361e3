"""Data store contract used by the availability, negotiation and booking services.

Services receive a repository instance instead of reaching for a global
session, so the same logic runs against PostgreSQL or an in-memory store.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractAsyncContextManager
from datetime import date
from uuid import UUID

from app.domain.negotiation_state import NegotiationStatus
from app.models.booking import Booking
from app.models.hotel import Room
from app.models.negotiation import Negotiation
from app.models.user import User


class StayRepository(ABC):
    """Abstract store for rooms, bookings and negotiations."""

    @abstractmethod
    def room_transaction(self, room_id: UUID) -> AbstractAsyncContextManager[None]:
        """Serialize check-then-write sequences on one room.

        Everything written inside the block commits or rolls back together,
        and no other room transaction on the same room interleaves with it.
        Writes that would break the room's non-overlap rule raise
        ConflictError.
        """

    @abstractmethod
    async def get_user(self, user_id: UUID) -> User | None:
        pass

    @abstractmethod
    async def get_managed_hotel_ids(self, user_id: UUID) -> frozenset[UUID]:
        """Return the hotels the user has a management relation with."""

    @abstractmethod
    async def get_room(self, room_id: UUID) -> Room | None:
        pass

    @abstractmethod
    async def get_booking(self, booking_id: UUID) -> Booking | None:
        """Fetch a booking, always reading current state."""

    @abstractmethod
    async def get_negotiation(self, negotiation_id: UUID) -> Negotiation | None:
        """Fetch a negotiation, always reading current state."""

    @abstractmethod
    async def find_overlapping_bookings(
        self, room_id: UUID, start_date: date, end_date: date
    ) -> list[Booking]:
        """Non-cancelled bookings of the room overlapping [start_date, end_date]."""

    @abstractmethod
    async def find_overlapping_negotiations(
        self,
        room_id: UUID,
        start_date: date,
        end_date: date,
        statuses: Iterable[NegotiationStatus],
        user_id: UUID | None = None,
    ) -> list[Negotiation]:
        """Negotiations of the room in ``statuses`` overlapping the range."""

    @abstractmethod
    async def add_booking(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def add_negotiation(self, negotiation: Negotiation) -> Negotiation:
        pass

    @abstractmethod
    async def save(self, entity: Booking | Negotiation) -> None:
        """Persist changes made to an entity."""

    @abstractmethod
    async def list_bookings_for_guest(self, user_id: UUID) -> list[Booking]:
        """Guest bookings, latest start date first."""

    @abstractmethod
    async def list_negotiations_for_guest(
        self, user_id: UUID, status: NegotiationStatus | None = None
    ) -> list[Negotiation]:
        """Guest negotiations, newest first."""

    @abstractmethod
    async def list_negotiations_for_hotel(
        self, hotel_id: UUID, status: NegotiationStatus | None = None
    ) -> list[Negotiation]:
        """Negotiations on the hotel's rooms, active ones first, then newest first."""
