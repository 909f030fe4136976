"""Caller identity value objects for the admin surface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AuthMethod(Enum):
    """Which credential source identified the caller."""

    ADMIN_SESSION = "admin_session"
    IDENTITY_PROVIDER = "identity_provider"


@dataclass(frozen=True)
class RequestCredentials:
    """Credentials extracted from an incoming request.

    Attributes:
        path: Path the caller asked for, preserved for post-login redirect.
        admin_session: Signed admin-session token, if the cookie was sent.
        provider_token: Identity-provider access token, if any.
    """

    path: str = "/"
    admin_session: str | None = None
    provider_token: str | None = None


@dataclass(frozen=True)
class ResolvedIdentity:
    """An email resolved from one credential source (not yet authorized)."""

    email: str
    auth_method: AuthMethod


@dataclass(frozen=True)
class AdminIdentity:
    """An authenticated, authorized admin."""

    email: str
    auth_method: AuthMethod
