"""In-memory identity provider for development and testing."""

from __future__ import annotations

from desaconnect.application.ports.identity_provider import IdentityProviderPort
from desaconnect.domain.services.email import normalize_email


class IdentityProviderStub(IdentityProviderPort):
    """Accounts and access tokens registered up front by tests or dev setup."""

    def __init__(self) -> None:
        self._passwords: dict[str, str] = {}
        self._tokens: dict[str, str] = {}

    def register_user(self, email: str, password: str) -> None:
        """Create or overwrite an account."""
        self._passwords[normalize_email(email)] = password

    def issue_token(self, email: str, token: str) -> None:
        """Make token resolve to email."""
        self._tokens[token] = normalize_email(email)

    async def get_user_email(self, access_token: str) -> str | None:
        return self._tokens.get(access_token)

    async def verify_password(self, email: str, password: str) -> bool:
        expected = self._passwords.get(normalize_email(email))
        return expected is not None and expected == password
