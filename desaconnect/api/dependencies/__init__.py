"""FastAPI dependency providers."""

from desaconnect.api.dependencies.portal import (
    get_admin_authorization_cache,
    get_admin_roster_service,
    get_admin_session_codec,
    get_session_guard_service,
    get_statistics_service,
    get_submission_service,
    reset_portal_dependencies,
)

__all__: list[str] = [
    "get_admin_authorization_cache",
    "get_admin_roster_service",
    "get_admin_session_codec",
    "get_session_guard_service",
    "get_statistics_service",
    "get_submission_service",
    "reset_portal_dependencies",
]
