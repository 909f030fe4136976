"""In-memory stub implementations of the application ports."""

from desaconnect.infrastructure.stubs.admin_roster_repository_stub import (
    AdminRosterRepositoryStub,
)
from desaconnect.infrastructure.stubs.file_storage_stub import FileStorageStub
from desaconnect.infrastructure.stubs.identity_provider_stub import (
    IdentityProviderStub,
)
from desaconnect.infrastructure.stubs.submission_repository_stub import (
    SubmissionRepositoryStub,
)

__all__: list[str] = [
    "AdminRosterRepositoryStub",
    "FileStorageStub",
    "IdentityProviderStub",
    "SubmissionRepositoryStub",
]
