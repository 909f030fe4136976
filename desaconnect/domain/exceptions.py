"""Base exception classes for the DesaConnect domain layer.

Every domain error belongs to exactly one of five kinds. The HTTP layer maps
each kind to one response shape, so new errors only need to pick a parent.
"""


class DesaConnectError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from one of the kind
    classes below rather than from this class directly.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)


class InvalidInputError(DesaConnectError):
    """Malformed caller input. Recoverable locally, never retried.

    Attributes:
        field: Name of the offending input field, if known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class NotFoundError(DesaConnectError):
    """A lookup by id, reference code or email matched nothing."""


class ConflictError(DesaConnectError):
    """The request collides with current state (duplicates, roster invariants)."""


class AuthorizationError(DesaConnectError):
    """Caller is not authenticated or not an admin.

    Always raised before any mutation. Messages never reveal whether an
    email exists in the roster.
    """


class DependencyError(DesaConnectError):
    """A backing store or external service failed.

    The message is for server-side logs only; callers receive a generic
    failure message.
    """
