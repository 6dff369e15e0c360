"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "internal_error"
    retryable: bool = False

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "unauthenticated"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "forbidden"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidBookingStatus(AppException):
    """Invalid booking status for operation."""

    code = "invalid_state"

    def __init__(
        self,
        detail: str = "This operation is not allowed for the current booking status",
        current_status: str | None = None,
    ) -> None:
        self.current_status = current_status
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AlreadyProcessedError(AppException):
    """Operation was already performed on this resource."""

    code = "already_done"

    def __init__(self, detail: str = "This operation has already been performed") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ActiveBookingConflict(AppException):
    """User already holds another checked-in booking."""

    code = "conflict"

    def __init__(self, workspace_name: str) -> None:
        self.workspace_name = workspace_name
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"You have an active booking at {workspace_name}. Please check out first.",
        )


class CheckInTooEarly(AppException):
    """Check-in attempted before the check-in window opens."""

    code = "too_early"

    def __init__(self, minutes_remaining: int) -> None:
        self.minutes_remaining = minutes_remaining
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Check-in available in {minutes_remaining} minutes",
        )


class CheckInExpired(AppException):
    """Check-in attempted after the check-in window closed."""

    code = "expired"

    def __init__(self, detail: str = "This booking time has passed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class StorageError(AppException):
    """Booking storage was unreachable or the write failed."""

    code = "storage_failure"
    retryable = True

    def __init__(self, detail: str = "Booking storage is temporarily unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class PaymentError(AppException):
    """Payment processing error."""

    code = "payment_error"

    def __init__(self, detail: str = "Payment processing failed") -> None:
        super().__init__(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=detail)


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    code = "rate_limited"

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)
