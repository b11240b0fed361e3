"""Room-related Pydantic schemas."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel


class AvailabilityResponse(BaseModel):
    """Schema for a room availability check."""

    room_id: UUID
    start_date: date
    end_date: date
    available: bool
    conflicting_bookings: int
    conflicting_negotiations: int
