"""Errors raised when a backing service fails.

Adapters wrap library exceptions in these types and chain the original
cause, so services never depend on a specific client library.
"""

from __future__ import annotations

from desaconnect.domain.exceptions import DependencyError


class StoreUnavailableError(DependencyError):
    """Raised when the relational store rejects or fails an operation.

    Attributes:
        operation: The repository operation that failed.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Store operation {operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class FileStorageError(DependencyError):
    """Raised when an attachment cannot be written to object storage."""

    def __init__(self, filename: str, detail: str = "") -> None:
        self.filename = filename
        self.detail = detail
        super().__init__(f"Failed to store attachment {filename}: {detail}")


class IdentityProviderError(DependencyError):
    """Raised when the identity provider cannot be reached."""


class ConfigurationError(DependencyError):
    """Raised when required configuration is missing or invalid.

    Fatal at startup: the service refuses to serve requests.
    """
