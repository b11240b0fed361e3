"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.booking_state import BookingStatus


class BookingBase(BaseModel):
    """Base booking schema."""

    room_id: UUID
    start_date: date
    end_date: date
    price: Decimal = Field(..., max_digits=10, decimal_places=2)


class BookingCreate(BookingBase):
    """Schema for booking a room directly."""


class CheckoutCreate(BookingBase):
    """Schema for booking a room through a payment session."""


class BookingConfirmRequest(BaseModel):
    """Schema for confirming payment of a booking."""

    session_id: str = Field(..., min_length=1, max_length=255)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    room_id: UUID
    user_id: UUID
    negotiation_id: UUID | None

    # Dates (inclusive)
    start_date: date
    end_date: date

    price: Decimal
    status: BookingStatus
    payment_session_id: str | None

    # Timestamps
    paid_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    """Schema for a guest's bookings."""

    bookings: list[BookingResponse]
    total: int


class CheckoutResponse(BaseModel):
    """Booking and the payment page to redirect the guest to."""

    booking: BookingResponse
    session_id: str
    redirect_url: str
