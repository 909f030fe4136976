"""Admin roster domain errors."""

from __future__ import annotations

from desaconnect.domain.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
)


class InvalidEmailError(InvalidInputError):
    """Raised when an email address does not have a valid shape."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Invalid email address: {email!r}", field="email")


class AdminAlreadyExistsError(ConflictError):
    """Raised when adding an email that is already on the roster."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"{email} is already an admin")


class AdminNotFoundError(NotFoundError):
    """Raised when removing or assigning to an email not on the roster."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Admin not found: {email}")


class SelfRemovalError(ConflictError):
    """Raised when an admin tries to remove their own roster entry."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("You cannot remove yourself from the admin roster")


class LastAdminRemovalError(ConflictError):
    """Raised when a removal would leave the roster empty."""

    def __init__(self, admin_count: int) -> None:
        self.admin_count = admin_count
        super().__init__("Cannot remove the last remaining admin")
