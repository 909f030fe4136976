"""Session guard for the admin surface.

Resolves who is calling and decides whether they may use admin routes.
Credential sources are tried in a fixed order:

1. admin_session cookie (signed email, see AdminSessionCodec)
2. Identity-provider access token (sb-access-token cookie or Bearer header)

An admin_session cookie that names an email which has since lost access
is stale: the caller is sent back to login and the cookie is deleted.
"""

from __future__ import annotations

from desaconnect.application.ports.identity_provider import IdentityProviderPort
from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.application.services.admin_session_codec import AdminSessionCodec
from desaconnect.application.services.base import LoggingMixin
from desaconnect.domain.errors.auth import (
    InvalidCredentialsError,
    NotAdminError,
    NotAuthenticatedError,
    StaleAdminSessionError,
)
from desaconnect.domain.errors.dependency import IdentityProviderError
from desaconnect.domain.models.identity import (
    AdminIdentity,
    AuthMethod,
    RequestCredentials,
    ResolvedIdentity,
)
from desaconnect.domain.services.email import normalize_email


class SessionGuardService(LoggingMixin):
    """Authenticates callers and enforces admin-only access."""

    def __init__(
        self,
        authorization_cache: AdminAuthorizationCache,
        session_codec: AdminSessionCodec,
        identity_provider: IdentityProviderPort,
    ) -> None:
        """Initialize the guard.

        Args:
            authorization_cache: Decides admin membership.
            session_codec: Verifies and issues admin-session tokens.
            identity_provider: Resolves provider tokens and passwords.
        """
        self._cache = authorization_cache
        self._codec = session_codec
        self._identity_provider = identity_provider
        self._init_logger(component="auth")

    async def resolve_caller_identity(
        self, credentials: RequestCredentials
    ) -> ResolvedIdentity | None:
        """Find the caller's email from the first usable credential source.

        Args:
            credentials: Credentials extracted from the request.

        Returns:
            The resolved identity, or None if no source yields one.
        """
        email = self._codec.verify(credentials.admin_session)
        if email is not None:
            return ResolvedIdentity(email=email, auth_method=AuthMethod.ADMIN_SESSION)

        if credentials.provider_token:
            try:
                provider_email = await self._identity_provider.get_user_email(
                    credentials.provider_token
                )
            except IdentityProviderError as e:
                log = self._log_operation("resolve_caller_identity")
                log.warning("identity_provider_unavailable", error=str(e))
                return None
            if provider_email:
                return ResolvedIdentity(
                    email=normalize_email(provider_email),
                    auth_method=AuthMethod.IDENTITY_PROVIDER,
                )

        return None

    async def require_admin(self, credentials: RequestCredentials) -> AdminIdentity:
        """Admit only authorized admins.

        Has no side effects when access is granted.

        Args:
            credentials: Credentials extracted from the request.

        Returns:
            The authenticated admin.

        Raises:
            NotAuthenticatedError: No identity; redirect to login.
            StaleAdminSessionError: Admin-session email lost access.
            NotAdminError: Identity is not an admin; redirect to landing.
        """
        log = self._log_operation("require_admin", path=credentials.path)
        identity = await self.resolve_caller_identity(credentials)

        if identity is None:
            log.info("admin_access_unauthenticated")
            raise NotAuthenticatedError(
                requested_path=credentials.path,
                clear_admin_session=credentials.admin_session is not None,
            )

        if not await self._cache.is_authorized_admin(identity.email):
            if identity.auth_method is AuthMethod.ADMIN_SESSION:
                log.warning("admin_session_stale", email=identity.email)
                raise StaleAdminSessionError(requested_path=credentials.path)
            log.warning("admin_access_denied", email=identity.email)
            raise NotAdminError()

        return AdminIdentity(email=identity.email, auth_method=identity.auth_method)

    async def login(self, email: str, password: str) -> str:
        """Exchange email and password for an admin-session token.

        Wrong passwords and non-admin accounts get the same error.

        Raises:
            InvalidCredentialsError: Login refused.
            IdentityProviderError: The provider could not be reached.
        """
        normalized = normalize_email(email)
        log = self._log_operation("login", email=normalized)

        if not await self._identity_provider.verify_password(normalized, password):
            log.info("admin_login_rejected", reason="bad_credentials")
            raise InvalidCredentialsError()

        if not await self._cache.is_authorized_admin(normalized):
            log.warning("admin_login_rejected", reason="not_admin")
            raise InvalidCredentialsError()

        log.info("admin_login_succeeded")
        return self._codec.issue(normalized)
