"""Admin roster management routes.

Admins can list, add (one or many) and remove other admins. Removal
refuses to remove the caller or the last remaining admin, and clears the
removed admin from submission assignments.
"""

from fastapi import APIRouter, Depends, Request, Response

from desaconnect.api.auth.admin_guard import require_admin
from desaconnect.api.dependencies.portal import get_admin_roster_service
from desaconnect.api.models.admin import (
    AddAdminRequest,
    AdminEntryResponse,
    AdminListResponse,
    BatchAddAdminsRequest,
    BatchAddAdminsResponse,
)
from desaconnect.api.models.problem import ProblemDetailResponse, problem_exception
from desaconnect.application.services.admin_roster_service import AdminRosterService
from desaconnect.domain.exceptions import DesaConnectError
from desaconnect.domain.models.identity import AdminIdentity

router = APIRouter(prefix="/v1/admin/roster", tags=["admin-roster"])


@router.get(
    "",
    response_model=AdminListResponse,
    responses={
        503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
    },
    summary="List admins",
)
async def list_admins(
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: AdminRosterService = Depends(get_admin_roster_service),
) -> AdminListResponse:
    """All admins, newest first."""
    try:
        entries = await service.list_admins()
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminListResponse(
        admins=[AdminEntryResponse.from_domain(entry) for entry in entries],
        count=len(entries),
    )


@router.post(
    "",
    response_model=AdminEntryResponse,
    status_code=201,
    responses={
        400: {"model": ProblemDetailResponse, "description": "Invalid email"},
        409: {"model": ProblemDetailResponse, "description": "Already an admin"},
        503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
    },
    summary="Add an admin",
)
async def add_admin(
    body: AddAdminRequest,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: AdminRosterService = Depends(get_admin_roster_service),
) -> AdminEntryResponse:
    try:
        entry = await service.add_admin(admin.email, body.email)
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminEntryResponse.from_domain(entry)


@router.post(
    "/batch",
    response_model=BatchAddAdminsResponse,
    summary="Add several admins",
)
async def add_admins(
    body: BatchAddAdminsRequest,
    admin: AdminIdentity = Depends(require_admin),
    service: AdminRosterService = Depends(get_admin_roster_service),
) -> BatchAddAdminsResponse:
    """Attempt every email independently and report each outcome.

    Always 200: per-email failures are in the body.
    """
    result = await service.add_admins(admin.email, body.emails)
    return BatchAddAdminsResponse.from_domain(result)


@router.delete(
    "/{email}",
    status_code=204,
    responses={
        404: {"model": ProblemDetailResponse, "description": "Not an admin"},
        409: {
            "model": ProblemDetailResponse,
            "description": "Self-removal or last admin",
        },
        503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
    },
    summary="Remove an admin",
)
async def remove_admin(
    email: str,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: AdminRosterService = Depends(get_admin_roster_service),
) -> Response:
    try:
        await service.remove_admin(admin.email, email)
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return Response(status_code=204)
