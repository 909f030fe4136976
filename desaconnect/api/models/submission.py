"""Submission API request/response models.

Public and admin views are separate models so that internal comments,
assignment and contact details can never leak into the tracking page.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer

from desaconnect.domain.models.submission import InternalComment, Submission
from desaconnect.domain.models.submission_query import SubmissionPage

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class SubmissionCreatedResponse(BaseModel):
    """Response to a successful submission."""

    reference_id: str = Field(..., description="8-character tracking code")


class PublicSubmissionResponse(BaseModel):
    """What a citizen sees when tracking a submission."""

    reference_id: str
    category: str
    description: str
    status: str
    file_url: str | None = None
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ | None = None

    @classmethod
    def from_domain(cls, submission: Submission) -> "PublicSubmissionResponse":
        return cls(
            reference_id=submission.reference_id,
            category=submission.category,
            description=submission.description,
            status=submission.status.value,
            file_url=submission.file_url,
            created_at=submission.created_at,
            updated_at=submission.updated_at,
        )


class InternalCommentResponse(BaseModel):
    """One admin-only comment."""

    text: str
    author: str
    created_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, comment: InternalComment) -> "InternalCommentResponse":
        return cls(text=comment.text, author=comment.author, created_at=comment.created_at)


class AdminSubmissionResponse(BaseModel):
    """Full submission as shown in the admin dashboard."""

    id: UUID
    reference_id: str
    name: str | None = None
    contact_info: str | None = None
    category: str
    description: str
    file_url: str | None = None
    status: str
    priority: str
    internal_comments: list[InternalCommentResponse] = Field(default_factory=list)
    assigned_to: str | None = None
    last_updated_by: str | None = None
    first_responded_at: DateTimeWithZ | None = None
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ | None = None

    @classmethod
    def from_domain(cls, submission: Submission) -> "AdminSubmissionResponse":
        return cls(
            id=submission.id,
            reference_id=submission.reference_id,
            name=submission.name,
            contact_info=submission.contact_info,
            category=submission.category,
            description=submission.description,
            file_url=submission.file_url,
            status=submission.status.value,
            priority=submission.priority.value,
            internal_comments=[
                InternalCommentResponse.from_domain(c)
                for c in submission.internal_comments
            ],
            assigned_to=submission.assigned_to,
            last_updated_by=submission.last_updated_by,
            first_responded_at=submission.first_responded_at,
            created_at=submission.created_at,
            updated_at=submission.updated_at,
        )


class SubmissionListResponse(BaseModel):
    """One page of the admin submission list."""

    items: list[AdminSubmissionResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_domain(cls, page: SubmissionPage) -> "SubmissionListResponse":
        return cls(
            items=[AdminSubmissionResponse.from_domain(s) for s in page.items],
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
        )


class UpdateStatusRequest(BaseModel):
    """Status change (case-insensitive)."""

    status: str = Field(..., description="pending, in progress or resolved")


class UpdatePriorityRequest(BaseModel):
    """Priority change (case-insensitive)."""

    priority: str = Field(..., description="Urgent or Regular")


class AssignmentRequest(BaseModel):
    """Assign to an admin email, or null to unassign."""

    assigned_to: str | None = None


class AddCommentRequest(BaseModel):
    """New internal comment."""

    text: str = Field(..., description="Comment body")
