"""Bootstrap wiring for DesaConnect storage and identity backends.

DESACONNECT_STORE_BACKEND selects the implementation behind each port:
- supabase (default): PostgREST tables, Storage bucket and Supabase Auth
- memory: in-process stubs (data will not persist)

DATABASE_URL additionally enables transactional admin removal through a
direct PostgreSQL connection.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from structlog import get_logger
from supabase import Client

from desaconnect.application.ports.admin_remover import (
    TransactionalAdminRemoverProtocol,
)
from desaconnect.application.ports.admin_roster_repository import (
    AdminRosterRepositoryProtocol,
)
from desaconnect.application.ports.file_storage import FileStoragePort
from desaconnect.application.ports.identity_provider import IdentityProviderPort
from desaconnect.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from desaconnect.bootstrap.settings import get_settings
from desaconnect.infrastructure.adapters.supabase import (
    SupabaseAdminRosterRepository,
    SupabaseFileStorage,
    SupabaseIdentityProvider,
    SupabaseSubmissionRepository,
    create_supabase_client,
)
from desaconnect.infrastructure.stubs import (
    AdminRosterRepositoryStub,
    FileStorageStub,
    IdentityProviderStub,
    SubmissionRepositoryStub,
)

logger = get_logger()

_supabase_client: Client | None = None
_submission_repository: SubmissionRepositoryProtocol | None = None
_admin_roster_repository: AdminRosterRepositoryProtocol | None = None
_file_storage: FileStoragePort | None = None
_identity_provider: IdentityProviderPort | None = None
_admin_remover: TransactionalAdminRemoverProtocol | None = None
_admin_remover_resolved = False


def get_supabase_client() -> Client:
    """Get the shared service-key Supabase client."""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = create_supabase_client(get_settings().store)
    return _supabase_client


def get_submission_repository() -> SubmissionRepositoryProtocol:
    """Get submission repository instance."""
    global _submission_repository
    if _submission_repository is None:
        store = get_settings().store
        if store.uses_memory:
            logger.warning(
                "submission_repository_initialized",
                repository_type="InMemoryStub",
                message="memory backend selected - data will not persist",
            )
            _submission_repository = SubmissionRepositoryStub()
        else:
            _submission_repository = SupabaseSubmissionRepository(
                get_supabase_client(), table=store.submissions_table
            )
            logger.info(
                "submission_repository_initialized",
                repository_type="Supabase",
                table=store.submissions_table,
            )
    return _submission_repository


def get_admin_roster_repository() -> AdminRosterRepositoryProtocol:
    """Get admin roster repository instance."""
    global _admin_roster_repository
    if _admin_roster_repository is None:
        store = get_settings().store
        if store.uses_memory:
            _admin_roster_repository = AdminRosterRepositoryStub()
        else:
            _admin_roster_repository = SupabaseAdminRosterRepository(
                get_supabase_client(), table=store.admin_table
            )
        logger.info(
            "admin_roster_repository_initialized",
            repository_type=type(_admin_roster_repository).__name__,
        )
    return _admin_roster_repository


def get_file_storage() -> FileStoragePort:
    """Get attachment storage instance."""
    global _file_storage
    if _file_storage is None:
        store = get_settings().store
        if store.uses_memory:
            _file_storage = FileStorageStub()
        else:
            _file_storage = SupabaseFileStorage(
                get_supabase_client(), bucket=store.storage_bucket
            )
    return _file_storage


def get_identity_provider() -> IdentityProviderPort:
    """Get identity provider instance.

    The Supabase provider gets its own client so user sessions created by
    password sign-in never replace the service key on table requests.
    """
    global _identity_provider
    if _identity_provider is None:
        store = get_settings().store
        if store.uses_memory:
            _identity_provider = IdentityProviderStub()
        else:
            _identity_provider = SupabaseIdentityProvider(create_supabase_client(store))
    return _identity_provider


def get_admin_remover() -> TransactionalAdminRemoverProtocol | None:
    """Get the transactional admin remover, or None without DATABASE_URL.

    A remover that cannot be built is logged and skipped; removal then
    runs step by step.
    """
    global _admin_remover, _admin_remover_resolved
    if not _admin_remover_resolved:
        _admin_remover_resolved = True
        store = get_settings().store
        if store.database_url and not store.uses_memory:
            try:
                from desaconnect.bootstrap.database import get_session_factory
                from desaconnect.infrastructure.adapters.persistence import (
                    PostgresAdminRemover,
                )

                _admin_remover = PostgresAdminRemover(
                    get_session_factory(store.database_url),
                    admin_table=store.admin_table,
                    submissions_table=store.submissions_table,
                )
                logger.info("admin_remover_initialized", remover_type="PostgreSQL")
            except (SQLAlchemyError, ValueError) as e:
                logger.error(
                    "admin_remover_init_failed",
                    error=str(e),
                    message="Falling back to sequential admin removal",
                )
                _admin_remover = None
        else:
            logger.info(
                "admin_remover_initialized",
                remover_type="sequential",
                message="DATABASE_URL not set - admin removal is not transactional",
            )
    return _admin_remover


def set_submission_repository(repository: SubmissionRepositoryProtocol) -> None:
    """Set custom submission repository (testing/override)."""
    global _submission_repository
    _submission_repository = repository


def set_admin_roster_repository(repository: AdminRosterRepositoryProtocol) -> None:
    """Set custom admin roster repository (testing/override)."""
    global _admin_roster_repository
    _admin_roster_repository = repository


def set_file_storage(storage: FileStoragePort) -> None:
    """Set custom attachment storage (testing/override)."""
    global _file_storage
    _file_storage = storage


def set_identity_provider(provider: IdentityProviderPort) -> None:
    """Set custom identity provider (testing/override)."""
    global _identity_provider
    _identity_provider = provider


def reset_portal_backends() -> None:
    """Reset all backend singletons (testing cleanup)."""
    global _supabase_client, _submission_repository, _admin_roster_repository
    global _file_storage, _identity_provider, _admin_remover, _admin_remover_resolved
    _supabase_client = None
    _submission_repository = None
    _admin_roster_repository = None
    _file_storage = None
    _identity_provider = None
    _admin_remover = None
    _admin_remover_resolved = False
