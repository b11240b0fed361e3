"""Manual payment gateway adapter.

Sessions live in process memory and are settled by an operator (bank
transfer, cash at the desk) via ``mark_paid``. Used in development and
tests where no card provider is configured.
"""

import uuid

from app.core.exceptions import PaymentProviderError
from app.gateways.base import (
    CheckoutRequest,
    CheckoutSession,
    GatewayType,
    PaymentGateway,
    SessionStatus,
)


class ManualGateway(PaymentGateway):
    """Manual payment gateway for offline settlement."""

    def __init__(self, app_url: str = ""):
        self.app_url = app_url.rstrip("/")
        self.sessions: dict[str, CheckoutRequest] = {}
        self._paid: set[str] = set()
        self.available = True

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.MANUAL

    def _ensure_available(self) -> None:
        if not self.available:
            raise PaymentProviderError(self.gateway_type.value, "Gateway offline")

    async def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Register a pending manual payment."""
        self._ensure_available()
        session_id = f"manual_{uuid.uuid4().hex}"
        self.sessions[session_id] = request
        return CheckoutSession(
            session_id=session_id,
            redirect_url=(
                f"{self.app_url}/bookings/success"
                f"?session_id={session_id}&booking_id={request.booking_id}"
            ),
        )

    async def get_session_status(self, session_id: str) -> SessionStatus:
        self._ensure_available()
        if session_id not in self.sessions:
            return SessionStatus.NOT_FOUND
        if session_id in self._paid:
            return SessionStatus.PAID
        return SessionStatus.UNPAID

    def mark_paid(self, session_id: str) -> None:
        """Record that the operator received the payment."""
        if session_id not in self.sessions:
            raise KeyError(session_id)
        self._paid.add(session_id)
