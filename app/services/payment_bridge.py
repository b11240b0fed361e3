"""Payment confirmation bridge.

Routes checkout operations to the configured gateway adapter.
No business logic here - only gateway coordination.
"""

import logging

from app.config import Settings, settings
from app.core.exceptions import AppException, PaymentProviderError
from app.gateways.base import (
    CheckoutRequest,
    CheckoutSession,
    GatewayType,
    PaymentGateway,
    SessionStatus,
)
from app.gateways.manual import ManualGateway
from app.gateways.stripe_gateway import StripeGateway

logger = logging.getLogger(__name__)


def build_gateway(config: Settings = settings) -> PaymentGateway:
    """Instantiate the gateway selected in settings."""
    if GatewayType(config.payment_gateway) == GatewayType.STRIPE:
        return StripeGateway(secret_key=config.stripe_secret_key, app_url=config.app_url)
    if config.environment == "production":
        logger.warning("Manual payment gateway in use in production")
    return ManualGateway(app_url=config.app_url)


class PaymentBridge:
    """Adapter between booking operations and a payment gateway."""

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway

    @property
    def provider(self) -> str:
        return self.gateway.gateway_type.value

    async def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Open a checkout session for a booking."""
        try:
            session = await self.gateway.create_session(request)
        except AppException:
            raise
        except Exception as e:
            logger.error(f"{self.provider} session creation crashed: {e}")
            raise PaymentProviderError(self.provider, str(e)) from e

        logger.info(
            f"Payment session {session.session_id} opened for booking {request.booking_id}"
        )
        return session

    async def get_session_status(self, session_id: str) -> SessionStatus:
        """Return PAID, UNPAID or NOT_FOUND.

        Raises:
            PaymentProviderError: provider unreachable or failing
        """
        try:
            status = await self.gateway.get_session_status(session_id)
        except AppException:
            raise
        except Exception as e:
            logger.error(f"{self.provider} session lookup crashed for {session_id}: {e}")
            raise PaymentProviderError(self.provider, str(e)) from e

        logger.info(f"Payment session {session_id} reported as {status.value}")
        return status
