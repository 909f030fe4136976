"""Unit tests for the admin session guard."""

from unittest.mock import AsyncMock

import pytest

from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.application.services.admin_session_codec import AdminSessionCodec
from desaconnect.application.services.session_guard_service import (
    SessionGuardService,
)
from desaconnect.domain.errors.auth import (
    InvalidCredentialsError,
    NotAdminError,
    NotAuthenticatedError,
    StaleAdminSessionError,
)
from desaconnect.domain.errors.dependency import IdentityProviderError
from desaconnect.domain.models.admin_entry import AdminEntry
from desaconnect.domain.models.identity import AuthMethod, RequestCredentials
from desaconnect.infrastructure.stubs import (
    AdminRosterRepositoryStub,
    IdentityProviderStub,
)


@pytest.fixture
def roster() -> AdminRosterRepositoryStub:
    return AdminRosterRepositoryStub([AdminEntry(email="kades@desa.id")])


@pytest.fixture
def cache(roster: AdminRosterRepositoryStub) -> AdminAuthorizationCache:
    return AdminAuthorizationCache(roster)


@pytest.fixture
def codec() -> AdminSessionCodec:
    return AdminSessionCodec("test-secret")


@pytest.fixture
def identity_provider() -> IdentityProviderStub:
    provider = IdentityProviderStub()
    provider.register_user("kades@desa.id", "rahasia123")
    provider.register_user("warga@desa.id", "warga123")
    provider.issue_token("kades@desa.id", "token-kades")
    provider.issue_token("warga@desa.id", "token-warga")
    return provider


@pytest.fixture
def guard(
    cache: AdminAuthorizationCache,
    codec: AdminSessionCodec,
    identity_provider: IdentityProviderStub,
) -> SessionGuardService:
    return SessionGuardService(cache, codec, identity_provider)


class TestResolveCallerIdentity:
    """Tests for resolve_caller_identity."""

    @pytest.mark.asyncio
    async def test_admin_session_takes_precedence(
        self, guard: SessionGuardService, codec: AdminSessionCodec
    ) -> None:
        identity = await guard.resolve_caller_identity(
            RequestCredentials(
                admin_session=codec.issue("kades@desa.id"),
                provider_token="token-warga",
            )
        )

        assert identity is not None
        assert identity.email == "kades@desa.id"
        assert identity.auth_method is AuthMethod.ADMIN_SESSION

    @pytest.mark.asyncio
    async def test_falls_back_to_provider_token(self, guard: SessionGuardService) -> None:
        identity = await guard.resolve_caller_identity(
            RequestCredentials(admin_session="garbage", provider_token="token-warga")
        )

        assert identity is not None
        assert identity.email == "warga@desa.id"
        assert identity.auth_method is AuthMethod.IDENTITY_PROVIDER

    @pytest.mark.asyncio
    async def test_no_credentials(self, guard: SessionGuardService) -> None:
        assert await guard.resolve_caller_identity(RequestCredentials()) is None

    @pytest.mark.asyncio
    async def test_provider_outage_resolves_none(
        self, cache: AdminAuthorizationCache, codec: AdminSessionCodec
    ) -> None:
        provider = IdentityProviderStub()
        provider.get_user_email = AsyncMock(  # type: ignore[method-assign]
            side_effect=IdentityProviderError("connection refused")
        )
        guard = SessionGuardService(cache, codec, provider)

        assert (
            await guard.resolve_caller_identity(RequestCredentials(provider_token="t"))
            is None
        )


class TestRequireAdmin:
    """Tests for require_admin."""

    @pytest.mark.asyncio
    async def test_admin_via_session(
        self, guard: SessionGuardService, codec: AdminSessionCodec
    ) -> None:
        admin = await guard.require_admin(
            RequestCredentials(
                path="/admin", admin_session=codec.issue("kades@desa.id")
            )
        )
        assert admin.email == "kades@desa.id"

    @pytest.mark.asyncio
    async def test_admin_via_provider_token(self, guard: SessionGuardService) -> None:
        admin = await guard.require_admin(RequestCredentials(provider_token="token-kades"))
        assert admin.auth_method is AuthMethod.IDENTITY_PROVIDER

    @pytest.mark.asyncio
    async def test_unauthenticated_redirects_to_login_with_path(
        self, guard: SessionGuardService
    ) -> None:
        with pytest.raises(NotAuthenticatedError) as exc_info:
            await guard.require_admin(RequestCredentials(path="/admin/stats"))

        assert exc_info.value.redirect_to == "/admin/login?redirect=%2Fadmin%2Fstats"
        assert exc_info.value.clear_admin_session is False

    @pytest.mark.asyncio
    async def test_invalid_session_cookie_is_cleared(
        self, guard: SessionGuardService
    ) -> None:
        with pytest.raises(NotAuthenticatedError) as exc_info:
            await guard.require_admin(RequestCredentials(admin_session="forged"))
        assert exc_info.value.clear_admin_session is True

    @pytest.mark.asyncio
    async def test_stale_session_after_removal(
        self,
        guard: SessionGuardService,
        codec: AdminSessionCodec,
        roster: AdminRosterRepositoryStub,
        cache: AdminAuthorizationCache,
    ) -> None:
        token = codec.issue("kades@desa.id")
        await roster.remove("kades@desa.id")
        cache.clear("kades@desa.id")

        with pytest.raises(StaleAdminSessionError) as exc_info:
            await guard.require_admin(
                RequestCredentials(path="/admin", admin_session=token)
            )

        assert exc_info.value.clear_admin_session is True
        assert exc_info.value.redirect_to.startswith("/admin/login")

    @pytest.mark.asyncio
    async def test_non_admin_sent_to_landing(self, guard: SessionGuardService) -> None:
        with pytest.raises(NotAdminError) as exc_info:
            await guard.require_admin(RequestCredentials(provider_token="token-warga"))
        assert exc_info.value.redirect_to == "/"


class TestLogin:
    """Tests for login."""

    @pytest.mark.asyncio
    async def test_login_issues_session(
        self, guard: SessionGuardService, codec: AdminSessionCodec
    ) -> None:
        token = await guard.login("Kades@Desa.ID", "rahasia123")
        assert codec.verify(token) == "kades@desa.id"

    @pytest.mark.asyncio
    async def test_wrong_password(self, guard: SessionGuardService) -> None:
        with pytest.raises(InvalidCredentialsError):
            await guard.login("kades@desa.id", "salah-sandi")

    @pytest.mark.asyncio
    async def test_non_admin_gets_same_error(self, guard: SessionGuardService) -> None:
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await guard.login("warga@desa.id", "warga123")
        assert str(exc_info.value) == "Invalid email or password"
