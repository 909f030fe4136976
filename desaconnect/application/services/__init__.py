"""Application services for DesaConnect."""

from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
    CachedAuthorization,
)
from desaconnect.application.services.admin_roster_service import AdminRosterService
from desaconnect.application.services.admin_session_codec import (
    ADMIN_SESSION_COOKIE,
    AdminSessionCodec,
)
from desaconnect.application.services.session_guard_service import (
    SessionGuardService,
)
from desaconnect.application.services.statistics_service import StatisticsService
from desaconnect.application.services.submission_service import (
    SubmissionInput,
    SubmissionService,
)

__all__: list[str] = [
    "ADMIN_SESSION_COOKIE",
    "AdminAuthorizationCache",
    "AdminRosterService",
    "AdminSessionCodec",
    "CachedAuthorization",
    "SessionGuardService",
    "StatisticsService",
    "SubmissionInput",
    "SubmissionService",
]
