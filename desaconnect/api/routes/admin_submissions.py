"""Admin submission triage routes.

All routes require an authorized admin (see api.auth.admin_guard). The
acting admin's email is recorded as last_updated_by on every change and as
the author of internal comments.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from desaconnect.api.auth.admin_guard import require_admin
from desaconnect.api.dependencies.portal import get_submission_service
from desaconnect.api.models.problem import ProblemDetailResponse, problem_exception
from desaconnect.api.models.submission import (
    AddCommentRequest,
    AdminSubmissionResponse,
    AssignmentRequest,
    SubmissionListResponse,
    UpdatePriorityRequest,
    UpdateStatusRequest,
)
from desaconnect.application.services.submission_service import SubmissionService
from desaconnect.domain.exceptions import DesaConnectError
from desaconnect.domain.models.identity import AdminIdentity
from desaconnect.domain.models.submission import SubmissionPriority, SubmissionStatus
from desaconnect.domain.models.submission_query import (
    DEFAULT_PAGE_SIZE,
    SortOrder,
    SubmissionQuery,
)

router = APIRouter(prefix="/v1/admin/submissions", tags=["admin-submissions"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ProblemDetailResponse, "description": "Invalid input"},
    401: {"model": ProblemDetailResponse, "description": "Not authenticated"},
    403: {"model": ProblemDetailResponse, "description": "Not an admin"},
    404: {"model": ProblemDetailResponse, "description": "Submission not found"},
    503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
}


@router.get(
    "",
    response_model=SubmissionListResponse,
    responses=_ERROR_RESPONSES,
    summary="List submissions",
)
async def list_submissions(
    request: Request,
    status: str | None = Query(default=None, description="pending, in progress or resolved"),
    category: str | None = Query(default=None),
    priority: str | None = Query(default=None, description="Urgent or Regular"),
    search: str | None = Query(default=None, max_length=200),
    sort: SortOrder = Query(default=SortOrder.NEWEST_FIRST, description="desc or asc"),
    page: int = Query(default=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE),
    admin: AdminIdentity = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionListResponse:
    """Filtered, paginated submission list (newest first by default)."""
    try:
        query = SubmissionQuery(
            status=SubmissionStatus.parse(status) if status else None,
            category=category.strip() if category and category.strip() else None,
            priority=SubmissionPriority.parse(priority) if priority else None,
            search=search.strip() if search and search.strip() else None,
            sort=sort,
        )
        result = await service.list(query, page=page, page_size=page_size)
    except DesaConnectError as e:
        raise problem_exception(e, request) from None

    return SubmissionListResponse.from_domain(result)


@router.get(
    "/{submission_id}",
    response_model=AdminSubmissionResponse,
    responses=_ERROR_RESPONSES,
    summary="Get a submission with internal comments",
)
async def get_submission(
    submission_id: UUID,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> AdminSubmissionResponse:
    try:
        submission = await service.get_by_id(submission_id)
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminSubmissionResponse.from_domain(submission)


@router.patch(
    "/{submission_id}/status",
    response_model=AdminSubmissionResponse,
    responses=_ERROR_RESPONSES,
    summary="Change status",
)
async def update_status(
    submission_id: UUID,
    body: UpdateStatusRequest,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> AdminSubmissionResponse:
    try:
        submission = await service.update_status(
            submission_id, body.status, actor=admin.email
        )
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminSubmissionResponse.from_domain(submission)


@router.patch(
    "/{submission_id}/priority",
    response_model=AdminSubmissionResponse,
    responses=_ERROR_RESPONSES,
    summary="Change priority",
)
async def update_priority(
    submission_id: UUID,
    body: UpdatePriorityRequest,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> AdminSubmissionResponse:
    try:
        submission = await service.update_priority(
            submission_id, body.priority, actor=admin.email
        )
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminSubmissionResponse.from_domain(submission)


@router.patch(
    "/{submission_id}/assignment",
    response_model=AdminSubmissionResponse,
    responses=_ERROR_RESPONSES,
    summary="Assign to an admin or unassign",
)
async def update_assignment(
    submission_id: UUID,
    body: AssignmentRequest,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> AdminSubmissionResponse:
    try:
        submission = await service.assign(
            submission_id, body.assigned_to, actor=admin.email
        )
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminSubmissionResponse.from_domain(submission)


@router.post(
    "/{submission_id}/comments",
    response_model=AdminSubmissionResponse,
    status_code=201,
    responses={
        **_ERROR_RESPONSES,
        409: {"model": ProblemDetailResponse, "description": "Concurrent update"},
    },
    summary="Add an internal comment",
)
async def add_comment(
    submission_id: UUID,
    body: AddCommentRequest,
    request: Request,
    admin: AdminIdentity = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> AdminSubmissionResponse:
    """Append a comment authored by the calling admin."""
    try:
        submission = await service.append_comment(
            submission_id, body.text, author=admin.email
        )
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    return AdminSubmissionResponse.from_domain(submission)
