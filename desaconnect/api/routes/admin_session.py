"""Admin login and logout.

A successful login sets the signed admin_session cookie (HttpOnly,
SameSite=Lax, one day by default). Logout deletes it. Wrong passwords and
non-admin accounts get the same 401 so the roster cannot be probed.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from desaconnect.api.auth.admin_guard import admin_session_cookie_header
from desaconnect.api.dependencies.portal import get_session_guard_service
from desaconnect.api.models.admin import LoginRequest, SessionResponse
from desaconnect.api.models.problem import (
    ProblemDetailResponse,
    problem_detail,
    problem_exception,
)
from desaconnect.application.services.session_guard_service import (
    SessionGuardService,
)
from desaconnect.domain.errors.auth import InvalidCredentialsError
from desaconnect.domain.exceptions import DesaConnectError
from desaconnect.domain.services.email import normalize_email

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/admin/session", tags=["admin-session"])

DEFAULT_ADMIN_LANDING = "/admin"


def _safe_redirect(target: str | None) -> str:
    """Only same-site absolute paths are honoured as post-login targets."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return DEFAULT_ADMIN_LANDING


@router.post(
    "",
    response_model=SessionResponse,
    responses={
        401: {"model": ProblemDetailResponse, "description": "Login refused"},
        503: {"model": ProblemDetailResponse, "description": "Identity provider down"},
    },
    summary="Log in as an admin",
)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    redirect: str | None = Query(default=None, description="Where to go afterwards"),
    guard: SessionGuardService = Depends(get_session_guard_service),
) -> SessionResponse:
    """Verify credentials and set the admin_session cookie."""
    try:
        token = await guard.login(body.email, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=401,
            detail=problem_detail(e, 401, request),
        ) from None
    except DesaConnectError as e:
        raise problem_exception(e, request) from None

    response.headers.append("set-cookie", admin_session_cookie_header(token))
    logger.info("admin_session_started", email=normalize_email(body.email))
    return SessionResponse(
        email=normalize_email(body.email),
        redirect_to=_safe_redirect(redirect),
    )


@router.delete("", status_code=204, summary="Log out")
async def logout() -> Response:
    """Delete the admin_session cookie. Succeeds with or without a session."""
    response = Response(status_code=204)
    response.headers.append("set-cookie", admin_session_cookie_header(None))
    return response
