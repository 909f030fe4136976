"""Submission domain model.

A submission is a single citizen-reported complaint or aspiration. It is
created by the public intake flow and afterwards mutated only by admins
(status, priority, assignment and internal comments).

Rules:
1. FROZEN - every mutation returns a new instance
2. APPEND ONLY - internal comments are never edited, removed or reordered
3. PUBLIC ID - reference_id is the only identifier shown to citizens
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from desaconnect.domain.errors.submission import (
    InvalidCommentError,
    InvalidPriorityError,
    InvalidStatusError,
)

DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 1000

# Offered by the intake form; any non-empty category is accepted.
SUGGESTED_CATEGORIES: tuple[str, ...] = (
    "Infrastructure",
    "Health",
    "Education",
    "Social Welfare",
    "Public Order",
    "Environment",
    "Administration",
    "Other",
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


class SubmissionStatus(Enum):
    """Lifecycle status of a submission.

    Values are stored lowercase, exactly as persisted.
    """

    PENDING = "pending"
    IN_PROGRESS = "in progress"
    RESOLVED = "resolved"

    @classmethod
    def parse(cls, value: str) -> SubmissionStatus:
        """Parse a status case-insensitively.

        Raises:
            InvalidStatusError: If the value is not a known status.
        """
        normalized = value.strip().lower() if isinstance(value, str) else ""
        for status in cls:
            if status.value == normalized:
                return status
        raise InvalidStatusError(str(value))


class SubmissionPriority(Enum):
    """Triage priority of a submission."""

    URGENT = "Urgent"
    REGULAR = "Regular"

    @classmethod
    def parse(cls, value: str) -> SubmissionPriority:
        """Parse a priority case-insensitively into its canonical spelling.

        Raises:
            InvalidPriorityError: If the value is not Urgent or Regular.
        """
        normalized = value.strip().lower() if isinstance(value, str) else ""
        for priority in cls:
            if priority.value.lower() == normalized:
                return priority
        raise InvalidPriorityError(str(value))


@dataclass(frozen=True, eq=True)
class InternalComment:
    """Admin-only annotation on a submission. Never shown to the public.

    Attributes:
        text: Comment body.
        author: Who wrote it (admin email or display name).
        created_at: Server-assigned timestamp.
    """

    text: str
    author: str
    created_at: datetime

    def __post_init__(self) -> None:
        """Validate comment fields."""
        if not self.text or not self.text.strip():
            raise InvalidCommentError("Comment text is required", field="text")
        if not self.author or not self.author.strip():
            raise InvalidCommentError("Comment author is required", field="author")


@dataclass(frozen=True, eq=True)
class Submission:
    """A citizen submission.

    Attributes:
        id: Internal unique identifier.
        reference_id: 8-character public tracking code.
        category: Free-text category label.
        description: Report body, 10-1000 characters.
        name: Optional submitter name.
        contact_info: Optional submitter contact details.
        file_url: Public URL of the stored attachment, if any.
        status: Current lifecycle status.
        priority: Current triage priority.
        internal_comments: Append-only admin comment thread.
        assigned_to: Admin email the submission is assigned to.
        last_updated_by: Admin email that last changed the submission.
        first_responded_at: When status first left pending.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC), None for legacy rows.
    """

    reference_id: str
    category: str
    description: str
    id: UUID = field(default_factory=uuid4)
    name: str | None = field(default=None)
    contact_info: str | None = field(default=None)
    file_url: str | None = field(default=None)
    status: SubmissionStatus = field(default=SubmissionStatus.PENDING)
    priority: SubmissionPriority = field(default=SubmissionPriority.REGULAR)
    internal_comments: tuple[InternalComment, ...] = field(default=())
    assigned_to: str | None = field(default=None)
    last_updated_by: str | None = field(default=None)
    first_responded_at: datetime | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime | None = field(default_factory=_utc_now)

    def with_status(
        self, status: SubmissionStatus, actor: str | None, now: datetime
    ) -> Submission:
        """Return a copy with a new status.

        The first move away from pending stamps first_responded_at; later
        changes keep the original stamp.
        """
        first_responded_at = self.first_responded_at
        if first_responded_at is None and status is not SubmissionStatus.PENDING:
            first_responded_at = now
        return replace(
            self,
            status=status,
            first_responded_at=first_responded_at,
            last_updated_by=actor,
            updated_at=now,
        )

    def with_priority(
        self, priority: SubmissionPriority, actor: str | None, now: datetime
    ) -> Submission:
        """Return a copy with a new priority."""
        return replace(self, priority=priority, last_updated_by=actor, updated_at=now)

    def with_assignee(
        self, assignee: str | None, actor: str | None, now: datetime
    ) -> Submission:
        """Return a copy assigned to another admin, or unassigned."""
        return replace(self, assigned_to=assignee, last_updated_by=actor, updated_at=now)

    def with_comment(self, comment: InternalComment) -> Submission:
        """Return a copy with one more comment appended to the thread."""
        return replace(
            self,
            internal_comments=(*self.internal_comments, comment),
            updated_at=comment.created_at,
        )

    def without_admin_references(self, email: str) -> Submission:
        """Return a copy with assignment/last-updated-by cleared for email.

        Does not touch updated_at: clearing a dangling reference is not a
        change to the complaint itself.
        """
        return replace(
            self,
            assigned_to=None if self.assigned_to == email else self.assigned_to,
            last_updated_by=(
                None if self.last_updated_by == email else self.last_updated_by
            ),
        )
