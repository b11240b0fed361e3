"""Stripe Checkout gateway adapter."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from app.config import settings
from app.core.exceptions import PaymentProviderError
from app.gateways.base import (
    CheckoutRequest,
    CheckoutSession,
    GatewayType,
    PaymentGateway,
    SessionStatus,
)

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert an amount to cents."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeGateway(PaymentGateway):
    """Stripe Checkout implementation."""

    def __init__(self, secret_key: str | None = None, app_url: str | None = None):
        self.secret_key = secret_key or settings.stripe_secret_key
        self.app_url = (app_url or settings.app_url).rstrip("/")

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.STRIPE

    def _client(self):
        if not self.secret_key:
            raise PaymentProviderError("stripe", "Stripe not configured")

        import stripe

        stripe.api_key = self.secret_key
        return stripe

    async def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Create a Stripe Checkout Session in payment mode."""
        stripe = self._client()
        try:
            session = stripe.checkout.Session.create(
                mode="payment",
                payment_method_types=["card"],
                success_url=(
                    f"{self.app_url}/bookings/success"
                    f"?session_id={{CHECKOUT_SESSION_ID}}&booking_id={request.booking_id}"
                ),
                cancel_url=f"{self.app_url}/rooms/{request.room_id}?cancelled=true",
                line_items=[
                    {
                        "price_data": {
                            "currency": request.currency.lower(),
                            "unit_amount": to_minor_units(request.amount),
                            "product_data": {
                                "name": f"Booking - {request.room_name}",
                                "description": (
                                    f"From {request.start_date.isoformat()} "
                                    f"to {request.end_date.isoformat()}"
                                ),
                            },
                        },
                        "quantity": 1,
                    }
                ],
                metadata={"booking_id": str(request.booking_id), **(request.metadata or {})},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe session creation failed for booking {request.booking_id}: {e}")
            raise PaymentProviderError("stripe", str(e)) from e

        return CheckoutSession(session_id=session.id, redirect_url=session.url)

    async def get_session_status(self, session_id: str) -> SessionStatus:
        """Retrieve a Checkout Session and map its payment status."""
        stripe = self._client()
        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.InvalidRequestError as e:
            if e.code == "resource_missing":
                return SessionStatus.NOT_FOUND
            logger.error(f"Stripe rejected session lookup {session_id}: {e}")
            raise PaymentProviderError("stripe", str(e)) from e
        except stripe.StripeError as e:
            logger.error(f"Stripe session lookup failed for {session_id}: {e}")
            raise PaymentProviderError("stripe", str(e)) from e

        if session.payment_status == "paid":
            return SessionStatus.PAID
        return SessionStatus.UNPAID
