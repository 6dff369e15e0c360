"""Roles and the authenticated identity passed into booking operations."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """User roles in the system."""

    USER = "user"
    STAFF = "staff"
    ADMIN = "admin"


STAFF_ROLES = {UserRole.STAFF, UserRole.ADMIN}


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from a verified bearer token.

    Lifecycle operations take this value instead of a request, so they
    stay unaware of how authentication was performed.
    """

    id: UUID
    role: UserRole = UserRole.USER
    nft_holder: bool = False
    email: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def owns(self, owner_id: UUID) -> bool:
        return self.id == owner_id

    @classmethod
    def from_claims(cls, claims: dict) -> "AuthenticatedUser":
        """Build an identity from decoded JWT claims.

        Raises:
            ValueError: If ``sub`` or ``role`` is malformed
        """
        return cls(
            id=UUID(str(claims["sub"])),
            role=UserRole(claims.get("role", UserRole.USER.value)),
            nft_holder=bool(claims.get("nft_holder", False)),
            email=claims.get("email"),
        )
