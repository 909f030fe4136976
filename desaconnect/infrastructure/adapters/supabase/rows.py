"""Typed row models for the Supabase tables.

Rows are validated on the way in. A row missing a required column (id,
reference_id, category, description, created_at) is logged and skipped
rather than handed to services half-formed. An unparseable optional
timestamp is logged and read as missing; the row itself is kept.

Comment JSON keeps the legacy {id, text, timestamp} shape and adds author;
rows written before author existed read back with author "unknown".
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from desaconnect.domain.exceptions import InvalidInputError
from desaconnect.domain.models.admin_entry import AdminEntry
from desaconnect.domain.models.submission import (
    InternalComment,
    Submission,
    SubmissionPriority,
    SubmissionStatus,
)


logger = structlog.get_logger(__name__)

UNKNOWN_AUTHOR = "unknown"

_datetime_adapter: TypeAdapter[datetime] = TypeAdapter(datetime)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CommentRow(BaseModel):
    """One element of the internal_comments JSON array."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    text: str
    author: str = UNKNOWN_AUTHOR
    timestamp: datetime = Field(
        validation_alias=AliasChoices("timestamp", "created_at")
    )

    @field_validator("timestamp")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    def to_domain(self) -> InternalComment:
        return InternalComment(
            text=self.text,
            author=self.author or UNKNOWN_AUTHOR,
            created_at=self.timestamp,
        )


def comment_to_json(comment: InternalComment) -> dict[str, Any]:
    """Serialize a comment into the stored JSON shape."""
    return {
        "id": str(int(comment.created_at.timestamp() * 1000)),
        "text": comment.text,
        "author": comment.author,
        "timestamp": comment.created_at.isoformat(),
    }


class SubmissionRow(BaseModel):
    """A row of the submissions table."""

    model_config = ConfigDict(extra="ignore")

    id: UUID
    reference_id: str
    name: str | None = None
    contact_info: str | None = None
    category: str
    description: str
    file_url: str | None = None
    status: str = SubmissionStatus.PENDING.value
    priority: str = SubmissionPriority.REGULAR.value
    internal_comments: list[CommentRow] | None = None
    assigned_to: str | None = None
    last_updated_by: str | None = None
    first_responded_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("first_responded_at", "updated_at", mode="before")
    @classmethod
    def _drop_unparseable_timestamp(cls, value: Any, info: ValidationInfo) -> Any:
        # Optional timestamps only feed processing-time averages.
        if value is None:
            return None
        try:
            return _datetime_adapter.validate_python(value)
        except ValidationError:
            logger.warning(
                "submission_timestamp_unparseable",
                row_id=str(info.data.get("id")),
                field=info.field_name,
                value=repr(value),
            )
            return None

    @field_validator("first_responded_at", "created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def to_domain(self) -> Submission:
        """Map to the domain model.

        Raises:
            InvalidStatusError: Stored status is not a known value.
            InvalidPriorityError: Stored priority is not a known value.
        """
        return Submission(
            id=self.id,
            reference_id=self.reference_id,
            name=self.name,
            contact_info=self.contact_info,
            category=self.category,
            description=self.description,
            file_url=self.file_url,
            status=SubmissionStatus.parse(self.status),
            priority=SubmissionPriority.parse(self.priority),
            internal_comments=tuple(
                comment.to_domain() for comment in self.internal_comments or []
            ),
            assigned_to=self.assigned_to,
            last_updated_by=self.last_updated_by,
            first_responded_at=self.first_responded_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def submission_to_row(submission: Submission) -> dict[str, Any]:
    """Build the insert payload for a new submission."""
    return {
        "id": str(submission.id),
        "reference_id": submission.reference_id,
        "name": submission.name,
        "contact_info": submission.contact_info,
        "category": submission.category,
        "description": submission.description,
        "file_url": submission.file_url,
        "status": submission.status.value,
        "priority": submission.priority.value,
        "internal_comments": [comment_to_json(c) for c in submission.internal_comments],
        "assigned_to": submission.assigned_to,
        "last_updated_by": submission.last_updated_by,
        "first_responded_at": _iso(submission.first_responded_at),
        "created_at": submission.created_at.isoformat(),
        "updated_at": _iso(submission.updated_at),
    }


def submission_field_value(submission: Submission, field_name: str) -> Any:
    """Column value for one updatable field."""
    value = getattr(submission, field_name)
    if isinstance(value, (SubmissionStatus, SubmissionPriority)):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def row_to_submission(data: dict[str, Any]) -> Submission | None:
    """Validate and map one raw row, or log and return None if malformed."""
    try:
        return SubmissionRow.model_validate(data).to_domain()
    except (ValidationError, InvalidInputError) as e:
        logger.warning(
            "submission_row_rejected",
            row_id=str(data.get("id")) if isinstance(data, dict) else None,
            error=str(e),
        )
        return None


class AdminRow(BaseModel):
    """A row of the admin roster table."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    def to_domain(self) -> AdminEntry:
        return AdminEntry(email=self.email, created_at=self.created_at)


def row_to_admin(data: dict[str, Any]) -> AdminEntry | None:
    """Validate and map one roster row, or log and return None if malformed."""
    try:
        return AdminRow.model_validate(data).to_domain()
    except ValidationError as e:
        logger.warning("admin_row_rejected", error=str(e))
        return None
