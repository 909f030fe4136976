"""Application ports (interfaces implemented by infrastructure)."""

from desaconnect.application.ports.admin_remover import (
    TransactionalAdminRemoverProtocol,
)
from desaconnect.application.ports.admin_roster_repository import (
    AdminRosterRepositoryProtocol,
)
from desaconnect.application.ports.file_storage import FileStoragePort
from desaconnect.application.ports.identity_provider import IdentityProviderPort
from desaconnect.application.ports.operational_metrics import (
    OperationalMetricsProtocol,
)
from desaconnect.application.ports.submission_repository import (
    UPDATABLE_FIELDS,
    SubmissionRepositoryProtocol,
)

__all__: list[str] = [
    "AdminRosterRepositoryProtocol",
    "FileStoragePort",
    "IdentityProviderPort",
    "OperationalMetricsProtocol",
    "SubmissionRepositoryProtocol",
    "TransactionalAdminRemoverProtocol",
    "UPDATABLE_FIELDS",
]
