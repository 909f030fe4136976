"""Authentication and authorization errors for the admin surface.

Each error carries where the caller should be sent next. The HTTP layer
turns that into a redirect for browsers or a problem response for API
clients.
"""

from __future__ import annotations

from urllib.parse import urlencode

from desaconnect.domain.exceptions import AuthorizationError

LOGIN_PATH = "/admin/login"
LANDING_PATH = "/"


def login_redirect(requested_path: str | None) -> str:
    """Build the login URL that returns to the requested path afterwards."""
    if not requested_path:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?{urlencode({'redirect': requested_path})}"


class NotAuthenticatedError(AuthorizationError):
    """Raised when no caller identity could be resolved.

    Attributes:
        redirect_to: Login URL preserving the originally requested path.
        clear_admin_session: Whether the admin-session cookie must be deleted.
    """

    def __init__(
        self,
        requested_path: str | None = None,
        clear_admin_session: bool = False,
        message: str = "Authentication required",
    ) -> None:
        self.redirect_to = login_redirect(requested_path)
        self.clear_admin_session = clear_admin_session
        super().__init__(message)


class StaleAdminSessionError(NotAuthenticatedError):
    """Raised when an admin-session cookie names an email that lost access."""

    def __init__(self, requested_path: str | None = None) -> None:
        super().__init__(
            requested_path=requested_path,
            clear_admin_session=True,
            message="Admin session is no longer valid",
        )


class NotAdminError(AuthorizationError):
    """Raised when a logged-in caller is not an authorized admin.

    Sends the caller to the public landing page rather than the login page.
    """

    def __init__(self, clear_admin_session: bool = False) -> None:
        self.redirect_to = LANDING_PATH
        self.clear_admin_session = clear_admin_session
        super().__init__("Admin access required")


class InvalidCredentialsError(AuthorizationError):
    """Raised when a login attempt fails.

    The same error is used for a wrong password and for a non-admin email.
    """

    def __init__(self) -> None:
        self.redirect_to = LOGIN_PATH
        self.clear_admin_session = False
        super().__init__("Invalid email or password")
