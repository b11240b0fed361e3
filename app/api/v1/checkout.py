"""Checkout endpoint: booking plus payment session."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import CurrentIdentity, get_booking_service
from app.schemas.booking import BookingResponse, CheckoutCreate, CheckoutResponse
from app.services.booking_service import BookingService

router = APIRouter()


@router.post("/", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def create_checkout(
    request: CheckoutCreate,
    identity: CurrentIdentity,
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> CheckoutResponse:
    """Create a PENDING booking and the payment page to pay it on."""
    booking, session = await service.create_checkout(
        identity,
        room_id=request.room_id,
        start_date=request.start_date,
        end_date=request.end_date,
        price=request.price,
    )
    return CheckoutResponse(
        booking=BookingResponse.model_validate(booking),
        session_id=session.session_id,
        redirect_url=session.redirect_url,
    )
