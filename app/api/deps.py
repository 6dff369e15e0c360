"""API dependencies for authentication and common operations."""

from datetime import UTC, datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.permissions import AuthenticatedUser
from app.core.security import verify_token
from app.database import get_db
from app.repositories.base import BookingRepository
from app.repositories.booking_repository import SQLAlchemyBookingRepository
from app.services.booking_lifecycle_service import BookingLifecycleService

# Security scheme
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthenticatedUser:
    """Resolve the authenticated identity from the bearer token."""
    payload = verify_token(credentials.credentials, token_type="access")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")

    try:
        return AuthenticatedUser.from_claims(payload)
    except ValueError as e:
        raise AuthenticationError(f"Invalid token claims: {e}")


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_security)],
) -> AuthenticatedUser | None:
    """Authenticated identity when a bearer token is sent, else None."""
    if credentials is None:
        return None
    return await get_current_user(credentials)


async def require_staff(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> AuthenticatedUser:
    """Get current user and verify they are staff or admin."""
    if not current_user.is_staff:
        raise AuthorizationError("Staff access required")
    return current_user


def get_now() -> datetime:
    """Current instant; overridden in tests to pin the clock."""
    return datetime.now(UTC)


def get_booking_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingRepository:
    return SQLAlchemyBookingRepository(db)


def get_booking_lifecycle_service(
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
) -> BookingLifecycleService:
    return BookingLifecycleService(repository, site_timezone=ZoneInfo(settings.site_timezone))
