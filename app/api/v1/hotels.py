"""Hotel endpoints for managers."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import CurrentIdentity, get_negotiation_service
from app.schemas.negotiation import NegotiationListResponse
from app.services.negotiation_service import NegotiationService

router = APIRouter()


@router.get("/{hotel_id}/negotiations", response_model=NegotiationListResponse)
async def list_hotel_negotiations(
    hotel_id: UUID,
    identity: CurrentIdentity,
    service: Annotated[NegotiationService, Depends(get_negotiation_service)],
    status_filter: str | None = Query(None, alias="status"),
) -> dict:
    """List negotiations on the hotel's rooms, active ones first."""
    negotiations = await service.list_for_hotel(identity, hotel_id, status_filter)
    return {"negotiations": negotiations, "total": len(negotiations)}
