"""Supabase Auth gateway."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, AuthError, Client

from timelock_album.adapters.supabase_errors import wrap_store_errors
from timelock_album.errors import StoreError
from timelock_album.services.auth import AuthGateway, AuthUser

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Validates Supabase access tokens."""

    client: Client

    def current_user(self, access_token: str | None) -> AuthUser | None:
        """Return the user that owns the access token, if it is valid.

        A rejected token yields ``None``. Any other auth or transport failure
        raises ``StoreError``.
        """
        if not access_token:
            return None
        try:
            with wrap_store_errors("get user"):
                response = self.client.auth.get_user(access_token)
        except AuthApiError as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        except AuthError as exc:
            raise StoreError(f"Supabase get user failed: {exc}") from exc
        user = getattr(response, "user", None)
        if user is None:
            return None
        return AuthUser(id=UUID(str(user.id)), email=getattr(user, "email", None))
