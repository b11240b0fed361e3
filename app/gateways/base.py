"""Base payment gateway interface.

All gateway adapters must implement this interface.
Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID


class GatewayType(str, Enum):
    """Supported payment gateways."""

    STRIPE = "stripe"
    MANUAL = "manual"


class SessionStatus(str, Enum):
    """Payment status of a checkout session as reported by the provider."""

    PAID = "paid"
    UNPAID = "unpaid"
    NOT_FOUND = "not_found"


@dataclass
class CheckoutRequest:
    """What the guest is paying for."""

    booking_id: UUID
    room_id: UUID
    room_name: str
    start_date: date
    end_date: date
    amount: Decimal
    currency: str
    metadata: dict[str, str] | None = None


@dataclass
class CheckoutSession:
    """Provider-hosted checkout session."""

    session_id: str
    redirect_url: str | None


class PaymentGateway(ABC):
    """Abstract base class for payment gateways.

    Provider failures must raise PaymentProviderError; they are never
    reported as an unpaid session.
    """

    @property
    @abstractmethod
    def gateway_type(self) -> GatewayType:
        """Return the gateway type."""

    @abstractmethod
    async def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Create a checkout session for a booking.

        Args:
            request: Booking, room, dates and amount to charge

        Returns:
            CheckoutSession with the provider session id and redirect URL
        """

    @abstractmethod
    async def get_session_status(self, session_id: str) -> SessionStatus:
        """Look up the payment status of a session.

        Args:
            session_id: Provider session id

        Returns:
            SessionStatus.PAID, UNPAID or NOT_FOUND
        """
