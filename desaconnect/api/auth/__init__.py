"""Admin authentication for the HTTP layer."""

from desaconnect.api.auth.admin_guard import (
    PROVIDER_TOKEN_COOKIE,
    admin_session_cookie_header,
    extract_credentials,
    require_admin,
)

__all__ = [
    "PROVIDER_TOKEN_COOKIE",
    "admin_session_cookie_header",
    "extract_credentials",
    "require_admin",
]
