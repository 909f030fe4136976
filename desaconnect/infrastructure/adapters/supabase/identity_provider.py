"""Supabase Auth adapter for the identity provider port."""

from __future__ import annotations

import httpx
from supabase import AuthApiError, Client

from desaconnect.application.ports.identity_provider import IdentityProviderPort
from desaconnect.domain.errors.dependency import IdentityProviderError
from desaconnect.infrastructure.observability.logging import get_logger_for_component


class SupabaseIdentityProvider(IdentityProviderPort):
    """Resolves Supabase Auth tokens and verifies passwords.

    Uses a client dedicated to auth calls: signing in stores a user session
    on the client, which must not leak into the service-key client used
    for table access.
    """

    def __init__(self, auth_client: Client) -> None:
        self._client = auth_client
        self._log = get_logger_for_component(self.__class__.__name__, component="auth")

    async def get_user_email(self, access_token: str) -> str | None:
        try:
            response = self._client.auth.get_user(access_token)
        except AuthApiError as e:
            self._log.info("provider_token_rejected", status=e.status)
            return None
        except httpx.HTTPError as e:
            self._log.error("identity_provider_unreachable", error=str(e))
            raise IdentityProviderError(str(e)) from e
        if response is None or response.user is None:
            return None
        return response.user.email

    async def verify_password(self, email: str, password: str) -> bool:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            self._log.info("provider_login_rejected", status=e.status)
            return False
        except httpx.HTTPError as e:
            self._log.error("identity_provider_unreachable", error=str(e))
            raise IdentityProviderError(str(e)) from e
        return response.user is not None
