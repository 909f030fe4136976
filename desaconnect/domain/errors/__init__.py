"""Domain errors for DesaConnect.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from DesaConnectError through one of the five
error kinds defined in desaconnect.domain.exceptions.
"""

from desaconnect.domain.errors.admin import (
    AdminAlreadyExistsError,
    AdminNotFoundError,
    InvalidEmailError,
    LastAdminRemovalError,
    SelfRemovalError,
)
from desaconnect.domain.errors.auth import (
    InvalidCredentialsError,
    NotAdminError,
    NotAuthenticatedError,
    StaleAdminSessionError,
)
from desaconnect.domain.errors.dependency import (
    ConfigurationError,
    FileStorageError,
    IdentityProviderError,
    StoreUnavailableError,
)
from desaconnect.domain.errors.submission import (
    AttachmentRejectedError,
    ConcurrentModificationError,
    DuplicateReferenceError,
    InvalidCommentError,
    InvalidDescriptionError,
    InvalidPriorityError,
    InvalidStatusError,
    MissingCategoryError,
    SubmissionNotFoundError,
)
from desaconnect.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DependencyError,
    DesaConnectError,
    InvalidInputError,
    NotFoundError,
)

__all__: list[str] = [
    "AdminAlreadyExistsError",
    "AdminNotFoundError",
    "AttachmentRejectedError",
    "AuthorizationError",
    "ConcurrentModificationError",
    "ConfigurationError",
    "ConflictError",
    "DependencyError",
    "DesaConnectError",
    "DuplicateReferenceError",
    "FileStorageError",
    "IdentityProviderError",
    "InvalidCommentError",
    "InvalidCredentialsError",
    "InvalidDescriptionError",
    "InvalidEmailError",
    "InvalidInputError",
    "InvalidPriorityError",
    "InvalidStatusError",
    "LastAdminRemovalError",
    "MissingCategoryError",
    "NotAdminError",
    "NotAuthenticatedError",
    "NotFoundError",
    "SelfRemovalError",
    "StaleAdminSessionError",
    "StoreUnavailableError",
    "SubmissionNotFoundError",
]
