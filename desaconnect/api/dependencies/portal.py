"""DesaConnect API dependencies.

Singleton services built on the backends chosen in
desaconnect.bootstrap.portal. Routes depend on the get_* functions; tests
swap implementations with the set_* functions and clean up with
reset_portal_dependencies().
"""

from __future__ import annotations

from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.application.services.admin_roster_service import AdminRosterService
from desaconnect.application.services.admin_session_codec import AdminSessionCodec
from desaconnect.application.services.session_guard_service import (
    SessionGuardService,
)
from desaconnect.application.services.statistics_service import StatisticsService
from desaconnect.application.services.submission_service import SubmissionService
from desaconnect.bootstrap.metrics import get_metrics_collector
from desaconnect.bootstrap.portal import (
    get_admin_remover,
    get_admin_roster_repository,
    get_file_storage,
    get_identity_provider,
    get_submission_repository,
    reset_portal_backends,
)
from desaconnect.bootstrap.settings import get_settings, reset_settings

_authorization_cache: AdminAuthorizationCache | None = None
_session_codec: AdminSessionCodec | None = None
_session_guard_service: SessionGuardService | None = None
_submission_service: SubmissionService | None = None
_statistics_service: StatisticsService | None = None
_admin_roster_service: AdminRosterService | None = None


def get_admin_authorization_cache() -> AdminAuthorizationCache:
    """Get the process-wide admin authorization cache."""
    global _authorization_cache
    if _authorization_cache is None:
        auth = get_settings().auth
        _authorization_cache = AdminAuthorizationCache(
            roster_repository=get_admin_roster_repository(),
            ttl_seconds=auth.cache_ttl_seconds,
            bootstrap_emails=auth.bootstrap_admin_emails,
            metrics=get_metrics_collector(),
        )
    return _authorization_cache


def get_admin_session_codec() -> AdminSessionCodec:
    """Get the admin-session token codec."""
    global _session_codec
    if _session_codec is None:
        auth = get_settings().auth
        _session_codec = AdminSessionCodec(
            secret_key=auth.session_secret,
            max_age_seconds=auth.session_max_age_seconds,
        )
    return _session_codec


def get_session_guard_service() -> SessionGuardService:
    """Get the session guard service."""
    global _session_guard_service
    if _session_guard_service is None:
        _session_guard_service = SessionGuardService(
            authorization_cache=get_admin_authorization_cache(),
            session_codec=get_admin_session_codec(),
            identity_provider=get_identity_provider(),
        )
    return _session_guard_service


def get_submission_service() -> SubmissionService:
    """Get the submission service."""
    global _submission_service
    if _submission_service is None:
        _submission_service = SubmissionService(
            repository=get_submission_repository(),
            file_storage=get_file_storage(),
            upload_config=get_settings().upload,
            admin_checker=get_admin_authorization_cache(),
            metrics=get_metrics_collector(),
        )
    return _submission_service


def get_statistics_service() -> StatisticsService:
    """Get the statistics service."""
    global _statistics_service
    if _statistics_service is None:
        _statistics_service = StatisticsService(repository=get_submission_repository())
    return _statistics_service


def get_admin_roster_service() -> AdminRosterService:
    """Get the admin roster service."""
    global _admin_roster_service
    if _admin_roster_service is None:
        _admin_roster_service = AdminRosterService(
            roster_repository=get_admin_roster_repository(),
            submission_repository=get_submission_repository(),
            authorization_cache=get_admin_authorization_cache(),
            transactional_remover=get_admin_remover(),
        )
    return _admin_roster_service


def set_submission_service(service: SubmissionService) -> None:
    """Set custom submission service (testing/override)."""
    global _submission_service
    _submission_service = service


def set_statistics_service(service: StatisticsService) -> None:
    """Set custom statistics service (testing/override)."""
    global _statistics_service
    _statistics_service = service


def set_admin_roster_service(service: AdminRosterService) -> None:
    """Set custom admin roster service (testing/override)."""
    global _admin_roster_service
    _admin_roster_service = service


def reset_portal_dependencies() -> None:
    """Reset all singletons, including backends and settings (testing cleanup)."""
    global _authorization_cache, _session_codec, _session_guard_service
    global _submission_service, _statistics_service, _admin_roster_service
    _authorization_cache = None
    _session_codec = None
    _session_guard_service = None
    _submission_service = None
    _statistics_service = None
    _admin_roster_service = None
    reset_portal_backends()
    reset_settings()
