"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PaymentError,
    PaymentProviderError,
    PolicyError,
    ValidationError,
)
from app.core.permissions import Identity, UserRole, can_manage_hotel, is_owner
from app.core.security import create_access_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "InvalidStateError",
    "NotFoundError",
    "PaymentError",
    "PaymentProviderError",
    "PolicyError",
    "ValidationError",
    "Identity",
    "UserRole",
    "can_manage_hotel",
    "is_owner",
    "create_access_token",
    "verify_token",
]
