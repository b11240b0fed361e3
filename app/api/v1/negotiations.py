"""Negotiation endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import CurrentIdentity, get_negotiation_service
from app.models.negotiation import Negotiation
from app.schemas.negotiation import (
    NegotiationActionResponse,
    NegotiationCreate,
    NegotiationListResponse,
    NegotiationRespond,
    NegotiationResponse,
)
from app.services.negotiation_service import NegotiationService

router = APIRouter()

Negotiations = Annotated[NegotiationService, Depends(get_negotiation_service)]


@router.post("/", response_model=NegotiationResponse, status_code=status.HTTP_201_CREATED)
async def create_negotiation(
    request: NegotiationCreate,
    identity: CurrentIdentity,
    service: Negotiations,
) -> Negotiation:
    """Open a price offer on a room."""
    return await service.create_negotiation(
        identity,
        room_id=request.room_id,
        price=request.price,
        start_date=request.start_date,
        end_date=request.end_date,
    )


@router.get("/", response_model=NegotiationListResponse)
async def list_negotiations(
    identity: CurrentIdentity,
    service: Negotiations,
    status_filter: str | None = Query(None, alias="status"),
) -> dict:
    """List the current user's negotiations, newest first."""
    negotiations = await service.list_for_guest(identity, status_filter)
    return {"negotiations": negotiations, "total": len(negotiations)}


@router.get("/{negotiation_id}", response_model=NegotiationResponse)
async def get_negotiation(
    negotiation_id: UUID, identity: CurrentIdentity, service: Negotiations
) -> Negotiation:
    return await service.get_negotiation(identity, negotiation_id)


@router.patch("/{negotiation_id}", response_model=NegotiationActionResponse)
async def respond_to_negotiation(
    negotiation_id: UUID,
    request: NegotiationRespond,
    identity: CurrentIdentity,
    service: Negotiations,
) -> NegotiationActionResponse:
    """Manager accepts, rejects or counters a negotiation."""
    outcome = await service.respond(
        identity, negotiation_id, request.status, counter_price=request.counter_price
    )
    return NegotiationActionResponse.model_validate(outcome)


@router.post("/{negotiation_id}/accept-counter", response_model=NegotiationActionResponse)
async def accept_counter_offer(
    negotiation_id: UUID, identity: CurrentIdentity, service: Negotiations
) -> NegotiationActionResponse:
    """Guest accepts the manager's counter-offer."""
    outcome = await service.accept_counter(identity, negotiation_id)
    return NegotiationActionResponse.model_validate(outcome)


@router.post("/{negotiation_id}/cancel", response_model=NegotiationResponse)
async def cancel_negotiation(
    negotiation_id: UUID, identity: CurrentIdentity, service: Negotiations
) -> Negotiation:
    """Guest withdraws a negotiation."""
    outcome = await service.cancel(identity, negotiation_id)
    return outcome.negotiation
