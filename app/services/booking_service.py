"""Booking lifecycle service.

Bookings start PENDING and end either PAID (after the guest's payment
session is confirmed) or CANCELLED (guest cancellation inside the policy).
Every write that depends on room availability runs inside a room
transaction so concurrent requests cannot double-book a room.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from app.config import Settings, settings
from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from app.core.permissions import Identity, is_owner
from app.domain.availability import validate_date_range, validate_price
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.domain.cancellation_policy import assert_guest_can_cancel
from app.gateways.base import CheckoutRequest, CheckoutSession, SessionStatus
from app.models.booking import Booking
from app.models.hotel import Room
from app.models.negotiation import Negotiation
from app.repositories.base import StayRepository
from app.services.availability_service import AvailabilityService
from app.services.payment_bridge import PaymentBridge

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking creation, payment confirmation and cancellation."""

    def __init__(
        self,
        repository: StayRepository,
        availability: AvailabilityService | None = None,
        payments: PaymentBridge | None = None,
        config: Settings = settings,
    ):
        self.repository = repository
        self.availability = availability or AvailabilityService(repository)
        self.payments = payments
        self.config = config

    async def _get_room(self, room_id: UUID) -> Room:
        room = await self.repository.get_room(room_id)
        if not room:
            raise NotFoundError("Room", str(room_id))
        return room

    async def _get_owned_booking(self, identity: Identity, booking_id: UUID) -> Booking:
        booking = await self.repository.get_booking(booking_id)
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        if not is_owner(identity, booking):
            raise AuthorizationError("You don't have permission to access this booking")
        return booking

    async def _assert_available(self, room_id: UUID, start_date: date, end_date: date) -> None:
        if not await self.availability.is_room_available(room_id, start_date, end_date):
            logger.warning(
                f"Room {room_id} unavailable for {start_date.isoformat()}..{end_date.isoformat()}"
            )
            raise ConflictError("Room is not available for these dates")

    async def get_booking(self, identity: Identity, booking_id: UUID) -> Booking:
        """Get one of the caller's bookings."""
        return await self._get_owned_booking(identity, booking_id)

    async def list_bookings(self, identity: Identity) -> list[Booking]:
        """List the caller's bookings, latest stay first."""
        return await self.repository.list_bookings_for_guest(identity.user_id)

    async def create_booking(
        self,
        identity: Identity,
        room_id: UUID,
        start_date: date,
        end_date: date,
        price: Decimal,
    ) -> Booking:
        """Book a room directly, without payment session.

        Raises:
            ValidationError: missing or malformed dates/price
            NotFoundError: room does not exist
            ConflictError: dates overlap an existing booking or accepted offer
        """
        validate_date_range(start_date, end_date)
        validate_price(price)
        room = await self._get_room(room_id)

        async with self.repository.room_transaction(room.id):
            await self._assert_available(room.id, start_date, end_date)
            booking = await self.repository.add_booking(
                self._new_booking(identity.user_id, room.id, start_date, end_date, price)
            )

        logger.info(f"Booking {booking.id} created for room {room.id} by {identity.user_id}")
        return booking

    async def create_checkout(
        self,
        identity: Identity,
        room_id: UUID,
        start_date: date,
        end_date: date,
        price: Decimal,
    ) -> tuple[Booking, CheckoutSession]:
        """Book a room and open a payment session for it.

        The session is opened under the room lock, before the booking is
        stored, so a provider failure leaves no booking behind. If storing
        the booking then fails, the provider session is left unused and its
        id is logged at ERROR.
        """
        payments = self._require_payments()
        validate_date_range(start_date, end_date)
        validate_price(price)
        room = await self._get_room(room_id)

        async with self.repository.room_transaction(room.id):
            await self._assert_available(room.id, start_date, end_date)

            booking = self._new_booking(identity.user_id, room.id, start_date, end_date, price)
            session = await payments.create_session(self._checkout_request(identity, room, booking))
            booking.payment_session_id = session.session_id
            await self._store_with_session(self.repository.add_booking, booking)

        logger.info(
            f"Checkout booking {booking.id} created for room {room.id} "
            f"(session {session.session_id})"
        )
        return booking, session

    async def create_booking_checkout(
        self, identity: Identity, booking_id: UUID
    ) -> tuple[Booking, CheckoutSession]:
        """Open a payment session for one of the caller's PENDING bookings.

        This is how a booking created from an accepted negotiation gets paid.
        The session charges the booking's price. A booking holds at most one
        session.

        Raises:
            InvalidStateError: booking paid or cancelled
            ConflictError: booking already has a payment session
        """
        payments = self._require_payments()
        booking = await self._get_owned_booking(identity, booking_id)
        room = await self._get_room(booking.room_id)

        async with self.repository.room_transaction(room.id):
            booking = await self._get_owned_booking(identity, booking_id)
            if booking.status != BookingStatus.PENDING:
                raise InvalidStateError(f"Cannot pay a booking that is {booking.status.value}")
            if booking.payment_session_id:
                raise ConflictError("A payment session is already open for this booking")

            session = await payments.create_session(self._checkout_request(identity, room, booking))
            booking.payment_session_id = session.session_id
            booking.updated_at = datetime.now(UTC)
            await self._store_with_session(self.repository.save, booking)

        logger.info(f"Payment session {session.session_id} opened for booking {booking.id}")
        return booking, session

    async def materialize_negotiation(self, negotiation: Negotiation) -> Booking:
        """Create the PENDING booking of an accepted negotiation.

        Must be called inside the room transaction that accepts it.
        """
        booking = self._new_booking(
            negotiation.user_id,
            negotiation.room_id,
            negotiation.start_date,
            negotiation.end_date,
            negotiation.price,
        )
        booking.negotiation_id = negotiation.id
        booking = await self.repository.add_booking(booking)
        logger.info(f"Booking {booking.id} created from negotiation {negotiation.id}")
        return booking

    async def confirm_payment(
        self, identity: Identity, booking_id: UUID, session_id: str
    ) -> Booking:
        """Mark a booking PAID once its own payment session is paid.

        Only the session stored on the booking is accepted. Confirming an
        already paid booking returns it unchanged.

        Raises:
            ValidationError: booking has no session, or another one
            PaymentError: session unpaid or unknown to the provider
            PaymentProviderError: provider failure
        """
        if not session_id:
            raise ValidationError("session_id is required")
        payments = self._require_payments()

        booking = await self._get_owned_booking(identity, booking_id)
        if not booking.payment_session_id:
            raise ValidationError("No payment session has been opened for this booking")
        if booking.payment_session_id != session_id:
            raise ValidationError("Payment session does not belong to this booking")
        if booking.status == BookingStatus.PAID:
            return booking
        if booking.status == BookingStatus.CANCELLED:
            raise InvalidStateError("Cannot confirm payment of a cancelled booking")

        status = await payments.get_session_status(session_id)
        if status == SessionStatus.NOT_FOUND:
            raise PaymentError("Payment session not found")
        if status != SessionStatus.PAID:
            raise PaymentError("Payment has not been completed")

        async with self.repository.room_transaction(booking.room_id):
            booking = await self._get_owned_booking(identity, booking_id)
            if booking.status == BookingStatus.PAID:
                return booking
            assert_booking_transition(booking.status, BookingStatus.PAID)

            now = datetime.now(UTC)
            booking.status = BookingStatus.PAID
            booking.paid_at = now
            booking.updated_at = now
            await self.repository.save(booking)

        logger.info(f"Booking {booking.id} paid (session {session_id})")
        return booking

    async def cancel_booking(
        self, identity: Identity, booking_id: UUID, today: date | None = None
    ) -> Booking:
        """Cancel an unpaid booking outside the notice window.

        Raises:
            InvalidStateError: booking paid or already cancelled
            PolicyError: check-in too close
        """
        today = today or date.today()
        booking = await self._get_owned_booking(identity, booking_id)

        async with self.repository.room_transaction(booking.room_id):
            booking = await self._get_owned_booking(identity, booking_id)
            assert_guest_can_cancel(
                booking.status,
                booking.start_date,
                today,
                notice_days=self.config.cancellation_notice_days,
            )

            now = datetime.now(UTC)
            booking.status = BookingStatus.CANCELLED
            booking.cancelled_at = now
            booking.updated_at = now
            await self.repository.save(booking)

        logger.info(f"Booking {booking.id} cancelled by guest {identity.user_id}")
        return booking

    def _require_payments(self) -> PaymentBridge:
        if self.payments is None:
            raise PaymentError("Online payments are not configured")
        return self.payments

    def _checkout_request(self, identity: Identity, room: Room, booking: Booking) -> CheckoutRequest:
        return CheckoutRequest(
            booking_id=booking.id,
            room_id=room.id,
            room_name=room.name,
            start_date=booking.start_date,
            end_date=booking.end_date,
            amount=booking.price,
            currency=self.config.currency,
            metadata={"user_id": str(identity.user_id)},
        )

    async def _store_with_session(
        self, write: Callable[[Booking], Awaitable[object]], booking: Booking
    ) -> None:
        try:
            await write(booking)
        except Exception:
            logger.error(
                f"Payment session {booking.payment_session_id} orphaned: "
                f"booking {booking.id} could not be stored"
            )
            raise

    def _new_booking(
        self,
        user_id: UUID,
        room_id: UUID,
        start_date: date,
        end_date: date,
        price: Decimal,
    ) -> Booking:
        now = datetime.now(UTC)
        return Booking(
            id=uuid.uuid4(),
            room_id=room_id,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            price=Decimal(str(price)),
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
