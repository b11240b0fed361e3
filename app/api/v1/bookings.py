"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import CurrentIdentity, get_booking_service
from app.models.booking import Booking
from app.schemas.booking import (
    BookingConfirmRequest,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    CheckoutResponse,
)
from app.services.booking_service import BookingService

router = APIRouter()

Bookings = Annotated[BookingService, Depends(get_booking_service)]


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingCreate,
    identity: CurrentIdentity,
    service: Bookings,
) -> Booking:
    """Book a room directly at the given price."""
    return await service.create_booking(
        identity,
        room_id=request.room_id,
        start_date=request.start_date,
        end_date=request.end_date,
        price=request.price,
    )


@router.get("/", response_model=BookingListResponse)
async def list_bookings(identity: CurrentIdentity, service: Bookings) -> dict:
    """List the current user's bookings."""
    bookings = await service.list_bookings(identity)
    return {"bookings": bookings, "total": len(bookings)}


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: UUID, identity: CurrentIdentity, service: Bookings) -> Booking:
    return await service.get_booking(identity, booking_id)


@router.post(
    "/{booking_id}/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def checkout_booking(
    booking_id: UUID, identity: CurrentIdentity, service: Bookings
) -> CheckoutResponse:
    """Open the payment page for a PENDING booking, e.g. one from an accepted offer."""
    booking, session = await service.create_booking_checkout(identity, booking_id)
    return CheckoutResponse(
        booking=BookingResponse.model_validate(booking),
        session_id=session.session_id,
        redirect_url=session.redirect_url,
    )


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: UUID,
    request: BookingConfirmRequest,
    identity: CurrentIdentity,
    service: Bookings,
) -> Booking:
    """Confirm payment of a booking from its payment session."""
    return await service.confirm_payment(identity, booking_id, request.session_id)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(booking_id: UUID, identity: CurrentIdentity, service: Bookings) -> Booking:
    """Cancel an unpaid booking."""
    return await service.cancel_booking(identity, booking_id)
