"""Room endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_availability_service
from app.domain.availability import validate_date_range
from app.schemas.room import AvailabilityResponse
from app.services.availability_service import AvailabilityService

router = APIRouter()


@router.get("/{room_id}/availability", response_model=AvailabilityResponse)
async def get_room_availability(
    room_id: UUID,
    service: Annotated[AvailabilityService, Depends(get_availability_service)],
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> AvailabilityResponse:
    """Check whether a room is free over an inclusive date range."""
    validate_date_range(start_date, end_date)
    report = await service.check_availability(room_id, start_date, end_date)
    return AvailabilityResponse(
        room_id=room_id,
        start_date=start_date,
        end_date=end_date,
        available=report.available,
        conflicting_bookings=report.conflicting_bookings,
        conflicting_negotiations=report.conflicting_negotiations,
    )
