"""Submission service: intake, tracking and admin triage.

Developer Golden Rules:
1. VALIDATE FIRST - nothing is uploaded or persisted for invalid input
2. UPLOAD BEFORE INSERT - a failed upload aborts the submission
3. RETRY COLLISIONS - a duplicate reference code is regenerated, not surfaced
4. CAS FOR COMMENTS - comment appends never overwrite a concurrent append
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from desaconnect.application.ports.file_storage import FileStoragePort
from desaconnect.application.ports.operational_metrics import (
    OperationalMetricsProtocol,
)
from desaconnect.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.application.services.base import LoggingMixin
from desaconnect.config.settings import UploadConfig
from desaconnect.domain.errors.admin import AdminNotFoundError
from desaconnect.domain.errors.submission import (
    AttachmentRejectedError,
    ConcurrentModificationError,
    DuplicateReferenceError,
    InvalidDescriptionError,
    MissingCategoryError,
    SubmissionNotFoundError,
)
from desaconnect.domain.exceptions import InvalidInputError
from desaconnect.domain.models.submission import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    InternalComment,
    Submission,
    SubmissionPriority,
    SubmissionStatus,
)
from desaconnect.domain.models.submission_query import (
    MAX_PAGE_SIZE,
    SubmissionPage,
    SubmissionQuery,
)
from desaconnect.domain.models.uploaded_file import UploadedFile
from desaconnect.domain.services.email import normalize_email
from desaconnect.domain.services.reference_code import (
    generate_reference_code,
    is_reference_code,
)

DEFAULT_MAX_REFERENCE_ATTEMPTS = 3
DEFAULT_MAX_COMMENT_ATTEMPTS = 3

_STATUS_FIELDS = ("status", "first_responded_at", "last_updated_by", "updated_at")
_PRIORITY_FIELDS = ("priority", "last_updated_by", "updated_at")
_ASSIGNMENT_FIELDS = ("assigned_to", "last_updated_by", "updated_at")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class SubmissionInput:
    """Citizen-provided fields for a new submission.

    Attributes:
        category: Free-text category label.
        description: Report body.
        name: Optional submitter name.
        contact_info: Optional contact details.
        file: Optional attachment.
    """

    category: str
    description: str
    name: str | None = None
    contact_info: str | None = None
    file: UploadedFile | None = None


class SubmissionService(LoggingMixin):
    """Creates, reads and triages submissions."""

    def __init__(
        self,
        repository: SubmissionRepositoryProtocol,
        file_storage: FileStoragePort,
        reference_generator: Callable[[], str] = generate_reference_code,
        clock: Callable[[], datetime] = _utc_now,
        upload_config: UploadConfig | None = None,
        max_reference_attempts: int = DEFAULT_MAX_REFERENCE_ATTEMPTS,
        max_comment_attempts: int = DEFAULT_MAX_COMMENT_ATTEMPTS,
        admin_checker: AdminAuthorizationCache | None = None,
        metrics: OperationalMetricsProtocol | None = None,
    ) -> None:
        """Initialize the submission service.

        Args:
            repository: Submission storage.
            file_storage: Attachment storage.
            reference_generator: Produces candidate reference codes.
            clock: Source of UTC timestamps.
            upload_config: Attachment limits (defaults: 5 MB, documents/images).
            max_reference_attempts: Inserts tried before a collision surfaces.
            max_comment_attempts: CAS rounds before a comment append gives up.
            admin_checker: Validates assignees; assignment is unchecked if None.
            metrics: Optional counter sink.
        """
        if max_reference_attempts < 1:
            raise ValueError("max_reference_attempts must be at least 1")
        if max_comment_attempts < 1:
            raise ValueError("max_comment_attempts must be at least 1")
        self._repository = repository
        self._file_storage = file_storage
        self._generate_reference = reference_generator
        self._clock = clock
        self._upload_config = upload_config or UploadConfig()
        self._max_reference_attempts = max_reference_attempts
        self._max_comment_attempts = max_comment_attempts
        self._admin_checker = admin_checker
        self._metrics = metrics
        self._init_logger(component="submissions")

    @property
    def max_upload_bytes(self) -> int:
        """Largest attachment create() accepts."""
        return self._upload_config.max_bytes

    async def create(self, data: SubmissionInput) -> str:
        """File a new submission.

        Args:
            data: Citizen-provided fields.

        Returns:
            The public reference code.

        Raises:
            InvalidDescriptionError: Description length outside 10-1000.
            MissingCategoryError: Category blank.
            AttachmentRejectedError: File too large or disallowed type.
            FileStorageError: Upload failed; nothing was persisted.
            DuplicateReferenceError: Every generated code collided.
            StoreUnavailableError: The store failed.
        """
        log = self._log_operation("create")

        # Length counts the text as submitted; whitespace-only is still empty.
        description = data.description or ""
        if (
            not DESCRIPTION_MIN_LENGTH <= len(description) <= DESCRIPTION_MAX_LENGTH
            or not description.strip()
        ):
            raise InvalidDescriptionError(
                length=len(description),
                min_length=DESCRIPTION_MIN_LENGTH,
                max_length=DESCRIPTION_MAX_LENGTH,
            )
        category = (data.category or "").strip()
        if not category:
            raise MissingCategoryError()
        if data.file is not None:
            self._validate_attachment(data.file)

        file_url: str | None = None
        if data.file is not None:
            file_url = await self._file_storage.store(
                data.file.data, data.file.content_type, data.file.filename
            )
            log.info("attachment_stored", size=data.file.size)

        last_reference = ""
        for attempt in range(1, self._max_reference_attempts + 1):
            now = self._clock()
            submission = Submission(
                reference_id=self._generate_reference(),
                category=category,
                description=description,
                name=_optional_text(data.name),
                contact_info=_optional_text(data.contact_info),
                file_url=file_url,
                created_at=now,
                updated_at=now,
            )
            try:
                await self._repository.save(submission)
            except DuplicateReferenceError:
                log.warning(
                    "reference_code_collision",
                    reference_id=submission.reference_id,
                    attempt=attempt,
                )
                last_reference = submission.reference_id
                continue

            log.info(
                "submission_created",
                submission_id=str(submission.id),
                reference_id=submission.reference_id,
                category=category,
                has_attachment=file_url is not None,
            )
            if self._metrics is not None:
                self._metrics.increment_submissions_created()
            return submission.reference_id

        log.error("reference_code_exhausted", attempts=self._max_reference_attempts)
        raise DuplicateReferenceError(last_reference)

    async def get_by_reference_id(self, reference_id: str) -> Submission:
        """Look up a submission by its public code (case-insensitive).

        Malformed codes are reported as not found without a store lookup.

        Raises:
            SubmissionNotFoundError: No submission has that code.
        """
        code = (reference_id or "").strip().upper()
        if not is_reference_code(code):
            raise SubmissionNotFoundError(code)
        submission = await self._repository.get_by_reference_id(code)
        if submission is None:
            raise SubmissionNotFoundError(code)
        return submission

    async def get_by_id(self, submission_id: UUID) -> Submission:
        """Look up a submission by internal id.

        Raises:
            SubmissionNotFoundError: No submission has that id.
        """
        submission = await self._repository.get(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(submission_id)
        return submission

    async def list(
        self,
        query: SubmissionQuery | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> SubmissionPage:
        """List submissions for the admin dashboard.

        Args:
            query: Filters and sort order.
            page: 1-indexed page number.
            page_size: Items per page, 1 to 100.

        Raises:
            InvalidInputError: Page or page size out of range.
        """
        if page < 1:
            raise InvalidInputError(f"page must be at least 1, got {page}", field="page")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise InvalidInputError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}",
                field="page_size",
            )
        items, total = await self._repository.list(
            query or SubmissionQuery(),
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return SubmissionPage(
            items=items, total_count=total, page=page, page_size=page_size
        )

    async def update_status(
        self,
        submission_id: UUID,
        status: str | SubmissionStatus,
        actor: str | None,
    ) -> Submission:
        """Change a submission's status.

        The first change away from pending records first_responded_at.

        Raises:
            InvalidStatusError: Unknown status value.
            SubmissionNotFoundError: No such submission.
        """
        parsed = (
            status if isinstance(status, SubmissionStatus) else SubmissionStatus.parse(status)
        )
        current = await self.get_by_id(submission_id)
        updated = current.with_status(parsed, actor, self._clock())
        stored = await self._repository.update_fields(updated, _STATUS_FIELDS)
        self._log_operation(
            "update_status", submission_id=str(submission_id), actor=actor
        ).info(
            "submission_status_updated",
            previous_status=current.status.value,
            status=parsed.value,
        )
        return stored

    async def update_priority(
        self,
        submission_id: UUID,
        priority: str | SubmissionPriority,
        actor: str | None,
    ) -> Submission:
        """Change a submission's priority.

        Raises:
            InvalidPriorityError: Not Urgent or Regular.
            SubmissionNotFoundError: No such submission.
        """
        parsed = (
            priority
            if isinstance(priority, SubmissionPriority)
            else SubmissionPriority.parse(priority)
        )
        current = await self.get_by_id(submission_id)
        updated = current.with_priority(parsed, actor, self._clock())
        stored = await self._repository.update_fields(updated, _PRIORITY_FIELDS)
        self._log_operation(
            "update_priority", submission_id=str(submission_id), actor=actor
        ).info("submission_priority_updated", priority=parsed.value)
        return stored

    async def assign(
        self,
        submission_id: UUID,
        assignee: str | None,
        actor: str | None,
    ) -> Submission:
        """Assign a submission to an admin, or clear the assignment with None.

        Raises:
            AdminNotFoundError: Assignee is not an authorized admin.
            SubmissionNotFoundError: No such submission.
        """
        normalized = normalize_email(assignee) if assignee and assignee.strip() else None
        if normalized is not None and self._admin_checker is not None:
            if not await self._admin_checker.is_authorized_admin(normalized):
                raise AdminNotFoundError(normalized)

        current = await self.get_by_id(submission_id)
        updated = current.with_assignee(normalized, actor, self._clock())
        stored = await self._repository.update_fields(updated, _ASSIGNMENT_FIELDS)
        self._log_operation(
            "assign", submission_id=str(submission_id), actor=actor
        ).info("submission_assigned", assigned_to=normalized)
        return stored

    async def append_comment(
        self,
        submission_id: UUID,
        text: str,
        author: str,
    ) -> Submission:
        """Append an internal comment.

        Reads the thread, appends, and writes back only if nobody else
        wrote in between (compare-and-swap on updated_at). Lost races are
        retried with a fresh read.

        Raises:
            InvalidCommentError: Blank text or author.
            SubmissionNotFoundError: No such submission.
            ConcurrentModificationError: Every attempt lost a race.
        """
        log = self._log_operation(
            "append_comment", submission_id=str(submission_id), author=author
        )
        # Validates text and author before touching the store.
        InternalComment(
            text=(text or "").strip(),
            author=(author or "").strip(),
            created_at=self._clock(),
        )

        for attempt in range(1, self._max_comment_attempts + 1):
            current = await self.get_by_id(submission_id)
            comment = InternalComment(
                text=text.strip(), author=author.strip(), created_at=self._clock()
            )
            updated = current.with_comment(comment)
            stored = await self._repository.replace_comments(
                submission_id,
                updated.internal_comments,
                updated_at=comment.created_at,
                expected_updated_at=current.updated_at,
            )
            if stored is not None:
                log.info(
                    "submission_comment_added",
                    comment_count=len(stored.internal_comments),
                )
                return stored
            log.warning("submission_comment_conflict", attempt=attempt)

        log.error("submission_comment_gave_up", attempts=self._max_comment_attempts)
        raise ConcurrentModificationError(submission_id, "append_comment")

    def _validate_attachment(self, file: UploadedFile) -> None:
        if file.size > self._upload_config.max_bytes:
            limit_mb = self._upload_config.max_bytes / (1024 * 1024)
            raise AttachmentRejectedError(
                f"File size must be at most {limit_mb:g} MB"
            )
        if file.content_type not in self._upload_config.allowed_content_types:
            raise AttachmentRejectedError(
                f"File type {file.content_type!r} is not allowed; "
                "upload a JPEG, PNG, PDF or Word document"
            )
