"""Public submission routes.

Citizens file reports (multipart form, optional attachment) and track them
with the reference code they receive. Neither route needs authentication.

The tracking view never includes contact details or internal comments.
"""

import structlog
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from desaconnect.api.dependencies.portal import get_submission_service
from desaconnect.api.models.problem import ProblemDetailResponse, problem_exception
from desaconnect.api.models.submission import (
    PublicSubmissionResponse,
    SubmissionCreatedResponse,
)
from desaconnect.application.services.submission_service import (
    SubmissionInput,
    SubmissionService,
)
from desaconnect.domain.exceptions import DesaConnectError
from desaconnect.domain.models.uploaded_file import UploadedFile

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/submissions", tags=["submissions"])

DEFAULT_CONTENT_TYPE = "application/octet-stream"


async def _read_upload(
    file: UploadFile | None, max_bytes: int
) -> UploadedFile | None:
    """Read an attachment, stopping one byte past the size limit."""
    # Browsers send an empty part when no file was chosen.
    if file is None or not file.filename:
        return None
    data = await file.read(max_bytes + 1)
    return UploadedFile(
        filename=file.filename,
        content_type=file.content_type or DEFAULT_CONTENT_TYPE,
        data=data,
    )


@router.post(
    "",
    response_model=SubmissionCreatedResponse,
    status_code=201,
    responses={
        400: {"model": ProblemDetailResponse, "description": "Invalid submission"},
        409: {"model": ProblemDetailResponse, "description": "Reference collision"},
        503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
    },
    summary="File a new submission",
)
async def create_submission(
    request: Request,
    category: str = Form(""),
    description: str = Form(""),
    name: str | None = Form(None),
    contact_info: str | None = Form(None),
    file: UploadFile | None = File(None),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionCreatedResponse:
    """File a submission and return its tracking code.

    Raises:
        HTTPException: 400 on invalid input, 409 when no unique reference
            code could be allocated, 503 on store or upload failure.
    """
    try:
        upload = await _read_upload(file, service.max_upload_bytes)
        reference_id = await service.create(
            SubmissionInput(
                category=category,
                description=description,
                name=name,
                contact_info=contact_info,
                file=upload,
            )
        )
    except DesaConnectError as e:
        raise problem_exception(e, request) from None
    finally:
        if file is not None:
            await file.close()

    return SubmissionCreatedResponse(reference_id=reference_id)


@router.get(
    "/{reference_id}",
    response_model=PublicSubmissionResponse,
    responses={
        404: {"model": ProblemDetailResponse, "description": "Unknown reference code"},
        503: {"model": ProblemDetailResponse, "description": "Store unavailable"},
    },
    summary="Track a submission by reference code",
)
async def track_submission(
    reference_id: str,
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
) -> PublicSubmissionResponse:
    """Look up a submission by its public code (case-insensitive)."""
    try:
        submission = await service.get_by_reference_id(reference_id)
    except DesaConnectError as e:
        logger.info("submission_lookup_failed", error_type=type(e).__name__)
        raise problem_exception(e, request) from None

    return PublicSubmissionResponse.from_domain(submission)
