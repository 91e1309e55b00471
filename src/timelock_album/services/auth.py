"""Authentication interface."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """The authenticated caller."""

    id: UUID
    email: str | None = None


class AuthGateway(Protocol):
    """Resolves an access token to the current user."""

    def current_user(self, access_token: str | None) -> AuthUser | None:
        """Return the user for the token, or ``None`` when unauthenticated."""
