"""RFC 7807 problem details for domain errors.

Every domain error kind maps to one status code:
- InvalidInputError -> 400
- NotFoundError -> 404
- ConflictError -> 409
- AuthorizationError -> 401/403 (see api.auth.admin_guard)
- DependencyError -> 503, with a generic message
"""

from __future__ import annotations

import re
from typing import Any

import structlog
from fastapi import HTTPException, Request
from pydantic import BaseModel, Field

from desaconnect.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DependencyError,
    DesaConnectError,
    InvalidInputError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)

PROBLEM_TYPE_PREFIX = "urn:desaconnect:error:"

SERVICE_UNAVAILABLE_MESSAGE = (
    "The service is temporarily unavailable, please try again later"
)


class ProblemDetailResponse(BaseModel):
    """RFC 7807 error body (returned under "detail")."""

    type: str = Field(..., description="Problem type URI")
    title: str = Field(..., description="Short summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str = Field(..., description="Request URL")


def _slug(error: Exception) -> str:
    name = type(error).__name__.removesuffix("Error")
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


def _title(error: Exception) -> str:
    name = type(error).__name__.removesuffix("Error")
    return re.sub(r"(?<!^)(?=[A-Z])", " ", name)


def problem_detail(
    error: Exception,
    status_code: int,
    request: Request,
    detail: str | None = None,
    **extensions: Any,
) -> dict[str, Any]:
    """Build a problem-details dict for an error."""
    body: dict[str, Any] = {
        "type": f"{PROBLEM_TYPE_PREFIX}{_slug(error)}",
        "title": _title(error),
        "status": status_code,
        "detail": detail if detail is not None else str(error),
        "instance": str(request.url),
    }
    body.update(extensions)
    return body


def status_for(error: DesaConnectError) -> int:
    """HTTP status for a domain error kind."""
    if isinstance(error, InvalidInputError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    if isinstance(error, AuthorizationError):
        return 403
    return 503


def problem_exception(error: DesaConnectError, request: Request) -> HTTPException:
    """Translate a domain error into an HTTPException with problem details.

    Dependency failures get a generic message; their text stays in the logs.
    """
    status_code = status_for(error)
    extensions: dict[str, Any] = {}
    detail: str | None = None
    if isinstance(error, DependencyError):
        logger.error(
            "dependency_failure",
            error_type=type(error).__name__,
            error=str(error),
            path=request.url.path,
        )
        detail = SERVICE_UNAVAILABLE_MESSAGE
    elif isinstance(error, InvalidInputError) and error.field is not None:
        extensions["field"] = error.field
    return HTTPException(
        status_code=status_code,
        detail=problem_detail(error, status_code, request, detail=detail, **extensions),
    )
