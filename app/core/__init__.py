"""Core utilities and security modules."""

from app.core.exceptions import (
    ActiveBookingConflict,
    AlreadyProcessedError,
    AppException,
    AuthenticationError,
    AuthorizationError,
    CheckInExpired,
    CheckInTooEarly,
    InvalidBookingStatus,
    NotFoundError,
    PaymentError,
    RateLimitExceeded,
    StorageError,
    ValidationError,
)
from app.core.security import create_access_token, verify_token

__all__ = [
    "ActiveBookingConflict",
    "AlreadyProcessedError",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "CheckInExpired",
    "CheckInTooEarly",
    "InvalidBookingStatus",
    "NotFoundError",
    "PaymentError",
    "RateLimitExceeded",
    "StorageError",
    "ValidationError",
    "create_access_token",
    "verify_token",
]
