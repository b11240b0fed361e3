"""Room availability checks.

A room is available for a date range when no non-cancelled booking and
no accepted negotiation of that room overlaps it. Checks always read the
current store state. Callers that write afterwards must repeat the check
inside ``StayRepository.room_transaction``.
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from app.domain.negotiation_state import NegotiationStatus
from app.repositories.base import StayRepository


@dataclass
class AvailabilityReport:
    """Availability of a room with the number of conflicts found."""

    available: bool
    conflicting_bookings: int
    conflicting_negotiations: int


class AvailabilityService:
    """Read-only availability oracle."""

    def __init__(self, repository: StayRepository):
        self.repository = repository

    async def check_availability(
        self, room_id: UUID, start_date: date, end_date: date
    ) -> AvailabilityReport:
        """Count bookings and accepted negotiations overlapping the range."""
        bookings = await self.repository.find_overlapping_bookings(room_id, start_date, end_date)
        negotiations = await self.repository.find_overlapping_negotiations(
            room_id, start_date, end_date, statuses=[NegotiationStatus.ACCEPTED]
        )
        return AvailabilityReport(
            available=not bookings and not negotiations,
            conflicting_bookings=len(bookings),
            conflicting_negotiations=len(negotiations),
        )

    async def is_room_available(self, room_id: UUID, start_date: date, end_date: date) -> bool:
        """Check if the room is free over [start_date, end_date].

        Does not validate that the room exists.
        """
        report = await self.check_availability(room_id, start_date, end_date)
        return report.available
