"""Negotiation service.

Guests open price offers on a room for a date range; managers of the
room's hotel accept, reject or counter them; guests accept a counter-offer
or withdraw. Acceptance re-checks availability and creates the PENDING
booking in the same room transaction, so two overlapping negotiations can
never both end up accepted.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.permissions import Identity, can_manage_hotel, is_owner
from app.domain.availability import validate_date_range, validate_price
from app.domain.negotiation_state import (
    ACTIVE_NEGOTIATION_STATUSES,
    NegotiationAction,
    NegotiationStatus,
    Party,
    required_party,
    resolve_action,
)
from app.models.booking import Booking
from app.models.hotel import Room
from app.models.negotiation import Negotiation
from app.repositories.base import StayRepository
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingService

logger = logging.getLogger(__name__)


@dataclass
class NegotiationOutcome:
    """Negotiation after an action, with the booking an acceptance created."""

    negotiation: Negotiation
    booking: Booking | None = None


class NegotiationService:
    """Service for the negotiation lifecycle."""

    def __init__(
        self,
        repository: StayRepository,
        availability: AvailabilityService | None = None,
        bookings: BookingService | None = None,
    ):
        self.repository = repository
        self.availability = availability or AvailabilityService(repository)
        self.bookings = bookings or BookingService(repository, self.availability)

    async def _get_room(self, room_id: UUID) -> Room:
        room = await self.repository.get_room(room_id)
        if not room:
            raise NotFoundError("Room", str(room_id))
        return room

    async def _get_negotiation(self, negotiation_id: UUID) -> Negotiation:
        negotiation = await self.repository.get_negotiation(negotiation_id)
        if not negotiation:
            raise NotFoundError("Negotiation", str(negotiation_id))
        return negotiation

    def _authorize(
        self, identity: Identity, action: NegotiationAction, negotiation: Negotiation, room: Room
    ) -> None:
        party = required_party(action)
        if party == Party.MANAGER and not can_manage_hotel(identity, room.hotel_id):
            logger.warning(
                f"User {identity.user_id} tried to {action.value} negotiation "
                f"{negotiation.id} without managing hotel {room.hotel_id}"
            )
            raise AuthorizationError("Only a manager of this hotel can respond to this negotiation")
        if party == Party.GUEST and not is_owner(identity, negotiation):
            logger.warning(
                f"User {identity.user_id} tried to {action.value} negotiation "
                f"{negotiation.id} opened by another guest"
            )
            raise AuthorizationError("Only the guest who opened this negotiation can do this")

    async def create_negotiation(
        self,
        identity: Identity,
        room_id: UUID,
        price: Decimal,
        start_date: date,
        end_date: date,
    ) -> Negotiation:
        """Open a price offer on a room.

        Raises:
            ValidationError: missing or malformed dates/price
            NotFoundError: room does not exist
            ConflictError: room unavailable, or the guest already has an
                active negotiation overlapping these dates
        """
        validate_price(price)
        validate_date_range(start_date, end_date)
        room = await self._get_room(room_id)

        async with self.repository.room_transaction(room.id):
            if not await self.availability.is_room_available(room.id, start_date, end_date):
                logger.warning(f"Negotiation refused, room {room.id} unavailable")
                raise ConflictError("Room is not available for these dates")

            duplicates = await self.repository.find_overlapping_negotiations(
                room.id,
                start_date,
                end_date,
                statuses=ACTIVE_NEGOTIATION_STATUSES,
                user_id=identity.user_id,
            )
            if duplicates:
                raise ConflictError(
                    "You already have an active negotiation for this room and these dates"
                )

            now = datetime.now(UTC)
            negotiation = await self.repository.add_negotiation(
                Negotiation(
                    id=uuid.uuid4(),
                    room_id=room.id,
                    user_id=identity.user_id,
                    price=Decimal(str(price)),
                    start_date=start_date,
                    end_date=end_date,
                    status=NegotiationStatus.PENDING,
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info(
            f"Negotiation {negotiation.id} opened on room {room.id} "
            f"by {identity.user_id} at {negotiation.price}"
        )
        return negotiation

    async def get_negotiation(self, identity: Identity, negotiation_id: UUID) -> Negotiation:
        """Get a negotiation visible to its guest or to the hotel's managers."""
        negotiation = await self._get_negotiation(negotiation_id)
        if is_owner(identity, negotiation):
            return negotiation

        room = await self._get_room(negotiation.room_id)
        if not can_manage_hotel(identity, room.hotel_id):
            raise AuthorizationError("You don't have permission to access this negotiation")
        return negotiation

    async def list_for_guest(
        self, identity: Identity, status: NegotiationStatus | str | None = None
    ) -> list[Negotiation]:
        if status is not None:
            status = NegotiationStatus.parse(status)
        return await self.repository.list_negotiations_for_guest(identity.user_id, status)

    async def list_for_hotel(
        self,
        identity: Identity,
        hotel_id: UUID,
        status: NegotiationStatus | str | None = None,
    ) -> list[Negotiation]:
        """List negotiations on a hotel's rooms, for its managers only."""
        if not can_manage_hotel(identity, hotel_id):
            raise AuthorizationError("Only managers of this hotel can list its negotiations")
        if status is not None:
            status = NegotiationStatus.parse(status)
        return await self.repository.list_negotiations_for_hotel(hotel_id, status)

    async def accept(self, identity: Identity, negotiation_id: UUID) -> NegotiationOutcome:
        """Manager accepts the current offer and books the room."""
        return await self._apply(identity, negotiation_id, NegotiationAction.ACCEPT)

    async def reject(self, identity: Identity, negotiation_id: UUID) -> NegotiationOutcome:
        return await self._apply(identity, negotiation_id, NegotiationAction.REJECT)

    async def counter(
        self, identity: Identity, negotiation_id: UUID, counter_price: Decimal
    ) -> NegotiationOutcome:
        """Manager replaces the offer with a counter price."""
        validate_price(counter_price, field="counter_price")
        return await self._apply(
            identity, negotiation_id, NegotiationAction.COUNTER, counter_price=counter_price
        )

    async def accept_counter(self, identity: Identity, negotiation_id: UUID) -> NegotiationOutcome:
        """Guest accepts the manager's counter-offer and books the room."""
        return await self._apply(identity, negotiation_id, NegotiationAction.ACCEPT_COUNTER)

    async def cancel(self, identity: Identity, negotiation_id: UUID) -> NegotiationOutcome:
        """Guest withdraws an active negotiation."""
        return await self._apply(identity, negotiation_id, NegotiationAction.CANCEL)

    async def respond(
        self,
        identity: Identity,
        negotiation_id: UUID,
        status: NegotiationStatus | str,
        counter_price: Decimal | None = None,
    ) -> NegotiationOutcome:
        """Apply a manager response given as a target status."""
        target = NegotiationStatus.parse(status)
        if target == NegotiationStatus.ACCEPTED:
            return await self.accept(identity, negotiation_id)
        if target == NegotiationStatus.REJECTED:
            return await self.reject(identity, negotiation_id)
        if target == NegotiationStatus.COUNTERED:
            return await self.counter(identity, negotiation_id, counter_price)
        raise ValidationError(
            f"Managers can only accept, reject or counter (got {target.value})"
        )

    async def _apply(
        self,
        identity: Identity,
        negotiation_id: UUID,
        action: NegotiationAction,
        counter_price: Decimal | None = None,
    ) -> NegotiationOutcome:
        negotiation = await self._get_negotiation(negotiation_id)
        room = await self._get_room(negotiation.room_id)
        self._authorize(identity, action, negotiation, room)

        booking = None
        async with self.repository.room_transaction(room.id):
            # Status may have changed while waiting for the room
            negotiation = await self._get_negotiation(negotiation_id)
            previous = negotiation.status
            target = resolve_action(action, previous)

            if target == NegotiationStatus.ACCEPTED:
                available = await self.availability.is_room_available(
                    room.id, negotiation.start_date, negotiation.end_date
                )
                if not available:
                    logger.warning(
                        f"Negotiation {negotiation.id} cannot be accepted, "
                        f"room {room.id} no longer available"
                    )
                    raise ConflictError("Room is no longer available for these dates")
                booking = await self.bookings.materialize_negotiation(negotiation)

            if action == NegotiationAction.COUNTER:
                negotiation.price = Decimal(str(counter_price))
            negotiation.status = target
            negotiation.updated_at = datetime.now(UTC)
            await self.repository.save(negotiation)

        logger.info(
            f"Negotiation {negotiation.id}: {previous.value} → {target.value} "
            f"({action.value} by {identity.user_id})"
        )
        return NegotiationOutcome(negotiation=negotiation, booking=booking)
