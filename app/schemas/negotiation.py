"""Negotiation-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.negotiation_state import NegotiationStatus
from app.schemas.booking import BookingResponse


class NegotiationCreate(BaseModel):
    """Schema for opening a price offer."""

    room_id: UUID
    price: Decimal = Field(..., max_digits=10, decimal_places=2)
    start_date: date
    end_date: date


class NegotiationRespond(BaseModel):
    """Manager response: accepted, rejected or countered (with a counter price)."""

    status: str = Field(..., min_length=1, max_length=20)
    counter_price: Decimal | None = Field(None, max_digits=10, decimal_places=2)


class NegotiationResponse(BaseModel):
    """Schema for negotiation response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    room_id: UUID
    user_id: UUID
    price: Decimal
    start_date: date
    end_date: date
    status: NegotiationStatus
    created_at: datetime
    updated_at: datetime


class NegotiationActionResponse(BaseModel):
    """Negotiation after an action, with the booking an acceptance created."""

    model_config = ConfigDict(from_attributes=True)

    negotiation: NegotiationResponse
    booking: BookingResponse | None = None


class NegotiationListResponse(BaseModel):
    negotiations: list[NegotiationResponse]
    total: int
