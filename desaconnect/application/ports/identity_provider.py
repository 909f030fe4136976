"""Identity provider port.

The identity provider authenticates people (email + password, access
tokens). It knows nothing about who is an admin; that is the roster's job.
"""

from __future__ import annotations

from typing import Protocol


class IdentityProviderPort(Protocol):
    """Resolves provider credentials to an email address."""

    async def get_user_email(self, access_token: str) -> str | None:
        """Return the email behind an access token, or None if invalid.

        Raises:
            IdentityProviderError: If the provider cannot be reached.
        """
        ...

    async def verify_password(self, email: str, password: str) -> bool:
        """Check an email/password pair.

        Raises:
            IdentityProviderError: If the provider cannot be reached.
        """
        ...
