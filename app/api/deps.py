"""API dependencies for authentication and service wiring."""

from functools import lru_cache
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError
from app.core.permissions import Identity, UserRole
from app.core.security import verify_token
from app.database import get_db
from app.gateways.base import PaymentGateway
from app.repositories.base import StayRepository
from app.repositories.sql import SqlAlchemyRepository
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingService
from app.services.negotiation_service import NegotiationService
from app.services.payment_bridge import PaymentBridge, build_gateway

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StayRepository:
    """Repository bound to the request's database session."""
    return SqlAlchemyRepository(db)


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    """Gateway selected in settings, shared across requests."""
    return build_gateway()


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    repository: Annotated[StayRepository, Depends(get_repository)],
) -> Identity:
    """Resolve the caller from its JWT access token."""
    if not credentials:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    user = await repository.get_user(user_id)
    if not user:
        raise AuthenticationError("User not found")

    try:
        role = UserRole(user.role)
    except ValueError:
        role = UserRole.GUEST

    return Identity(
        user_id=user.id,
        role=role,
        managed_hotel_ids=await repository.get_managed_hotel_ids(user.id),
    )


def get_availability_service(
    repository: Annotated[StayRepository, Depends(get_repository)],
) -> AvailabilityService:
    return AvailabilityService(repository)


def get_booking_service(
    repository: Annotated[StayRepository, Depends(get_repository)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> BookingService:
    return BookingService(repository, payments=PaymentBridge(gateway))


def get_negotiation_service(
    repository: Annotated[StayRepository, Depends(get_repository)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> NegotiationService:
    return NegotiationService(repository, availability=bookings.availability, bookings=bookings)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
