"""Signed admin-session tokens.

The admin_session cookie carries the admin's email signed with
itsdangerous, so the server can trust it without a session table. The
token expires after max_age_seconds.
"""

from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from desaconnect.application.services.base import LoggingMixin
from desaconnect.domain.services.email import normalize_email

ADMIN_SESSION_COOKIE = "admin_session"
ADMIN_SESSION_SALT = "desaconnect-admin-session"


class AdminSessionCodec(LoggingMixin):
    """Issues and verifies admin-session tokens."""

    def __init__(self, secret_key: str, max_age_seconds: int = 24 * 60 * 60) -> None:
        """Initialize the codec.

        Args:
            secret_key: Signing key.
            max_age_seconds: Token lifetime.
        """
        self._serializer = URLSafeTimedSerializer(secret_key, salt=ADMIN_SESSION_SALT)
        self._max_age_seconds = max_age_seconds
        self._init_logger(component="auth")

    @property
    def max_age_seconds(self) -> int:
        return self._max_age_seconds

    def issue(self, email: str) -> str:
        """Create a token for an email (stored normalized)."""
        return self._serializer.dumps(normalize_email(email))

    def verify(self, token: str | None) -> str | None:
        """Return the email inside a valid token.

        Bad signatures, expired tokens and malformed payloads all count as
        no session at all.

        Returns:
            The normalized email, or None.
        """
        if not token:
            return None
        try:
            email = self._serializer.loads(token, max_age=self._max_age_seconds)
        except SignatureExpired:
            self._log.info("admin_session_expired")
            return None
        except BadSignature:
            self._log.warning("admin_session_bad_signature")
            return None
        if not isinstance(email, str) or not email.strip():
            return None
        return normalize_email(email)
