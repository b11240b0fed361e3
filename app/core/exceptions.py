"""Custom application exceptions."""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Missing or malformed input."""

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(AppException):
    """Dates taken or a duplicate active negotiation exists."""

    def __init__(self, detail: str = "Room is not available for these dates") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidStateError(AppException):
    """Transition not allowed from the current status."""

    def __init__(self, detail: str = "This operation is not allowed in the current state") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PolicyError(AppException):
    """Request refused by a booking policy."""

    def __init__(self, detail: str = "This request is not allowed by the booking policy") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class PaymentError(AppException):
    """Payment not completed."""

    def __init__(
        self,
        detail: str = "Payment processing failed",
        status_code: int = status.HTTP_402_PAYMENT_REQUIRED,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)


class PaymentProviderError(PaymentError):
    """Payment provider unreachable or returned an error."""

    def __init__(self, provider: str, detail: str | None = None) -> None:
        message = f"Payment provider '{provider}' is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(detail=message, status_code=status.HTTP_502_BAD_GATEWAY)
