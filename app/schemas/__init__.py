"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingConfirmRequest,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    CheckoutCreate,
    CheckoutResponse,
)
from app.schemas.negotiation import (
    NegotiationActionResponse,
    NegotiationCreate,
    NegotiationListResponse,
    NegotiationRespond,
    NegotiationResponse,
)
from app.schemas.room import AvailabilityResponse

__all__ = [
    # Booking
    "BookingCreate",
    "BookingConfirmRequest",
    "BookingResponse",
    "BookingListResponse",
    "CheckoutCreate",
    "CheckoutResponse",
    # Negotiation
    "NegotiationCreate",
    "NegotiationRespond",
    "NegotiationResponse",
    "NegotiationActionResponse",
    "NegotiationListResponse",
    # Room
    "AvailabilityResponse",
]
