"""Admin route guard.

FastAPI dependency that admits only authorized admins.

Denials depend on who is asking:
- Browser navigations (Accept: text/html) get 303 See Other with Location
- API clients get RFC 7807 401/403 bodies carrying redirect_to

When the admin_session cookie is invalid or stale, the denial response
also deletes it.

Usage:
    @router.get("/v1/admin/...")
    async def endpoint(admin: AdminIdentity = Depends(require_admin)):
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, Request
from starlette.responses import Response

from desaconnect.api.dependencies.portal import get_session_guard_service
from desaconnect.api.models.problem import problem_detail
from desaconnect.application.services.admin_session_codec import ADMIN_SESSION_COOKIE
from desaconnect.application.services.session_guard_service import (
    SessionGuardService,
)
from desaconnect.bootstrap.settings import get_settings
from desaconnect.domain.errors.auth import NotAdminError, NotAuthenticatedError
from desaconnect.domain.exceptions import AuthorizationError
from desaconnect.domain.models.identity import AdminIdentity, RequestCredentials

PROVIDER_TOKEN_COOKIE = "sb-access-token"
BEARER_PREFIX = "bearer "


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if header and header.lower().startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX) :].strip()
        return token or None
    return None


def extract_credentials(request: Request) -> RequestCredentials:
    """Collect every credential source the guard understands."""
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return RequestCredentials(
        path=path,
        admin_session=request.cookies.get(ADMIN_SESSION_COOKIE) or None,
        provider_token=request.cookies.get(PROVIDER_TOKEN_COOKIE)
        or _bearer_token(request),
    )


def admin_session_cookie_header(token: str | None) -> str:
    """Render a Set-Cookie header that sets (or, with None, deletes) the cookie."""
    auth = get_settings().auth
    response = Response()
    if token is None:
        response.delete_cookie(
            ADMIN_SESSION_COOKIE,
            path="/",
            secure=auth.cookie_secure,
            httponly=True,
            samesite="lax",
        )
    else:
        response.set_cookie(
            ADMIN_SESSION_COOKIE,
            token,
            max_age=auth.session_max_age_seconds,
            path="/",
            secure=auth.cookie_secure,
            httponly=True,
            samesite="lax",
        )
    return response.headers["set-cookie"]


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("Accept", "")


def authorization_exception(
    error: AuthorizationError, request: Request
) -> HTTPException:
    """Translate an authorization error into a redirect or problem response."""
    redirect_to: str = getattr(error, "redirect_to", "/")
    headers: dict[str, Any] = {}
    if getattr(error, "clear_admin_session", False):
        headers["set-cookie"] = admin_session_cookie_header(None)

    if _wants_html(request):
        headers["Location"] = redirect_to
        return HTTPException(
            status_code=303,
            detail={"redirect_to": redirect_to},
            headers=headers,
        )

    status_code = 403 if isinstance(error, NotAdminError) else 401
    if isinstance(error, NotAuthenticatedError):
        headers["WWW-Authenticate"] = "Bearer"
    return HTTPException(
        status_code=status_code,
        detail=problem_detail(error, status_code, request, redirect_to=redirect_to),
        headers=headers or None,
    )


async def require_admin(
    request: Request,
    guard: SessionGuardService = Depends(get_session_guard_service),
) -> AdminIdentity:
    """Dependency admitting only authorized admins.

    Raises:
        HTTPException: 303 for browsers, 401/403 for API clients.
    """
    try:
        return await guard.require_admin(extract_credentials(request))
    except AuthorizationError as e:
        raise authorization_exception(e, request) from None
