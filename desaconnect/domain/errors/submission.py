"""Submission domain errors.

These errors represent failures when filing, tracking or triaging a
citizen submission.
"""

from __future__ import annotations

from uuid import UUID

from desaconnect.domain.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
)


class InvalidDescriptionError(InvalidInputError):
    """Raised when the description is outside the accepted length range.

    Attributes:
        length: Length of the description that was rejected.
    """

    def __init__(self, length: int, min_length: int, max_length: int) -> None:
        self.length = length
        super().__init__(
            f"Description must be between {min_length} and {max_length} "
            f"characters (got {length})",
            field="description",
        )


class MissingCategoryError(InvalidInputError):
    """Raised when a submission has no category."""

    def __init__(self) -> None:
        super().__init__("Category is required", field="category")


class AttachmentRejectedError(InvalidInputError):
    """Raised when an attachment is too large or of a disallowed type."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="file")


class InvalidStatusError(InvalidInputError):
    """Raised when a status value is not one of the known statuses."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid status: {value!r}", field="status")


class InvalidPriorityError(InvalidInputError):
    """Raised when a priority value is not Urgent or Regular."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid priority: {value!r}", field="priority")


class InvalidCommentError(InvalidInputError):
    """Raised when a comment has no text or no author."""


class SubmissionNotFoundError(NotFoundError):
    """Raised when a submission cannot be found by id or reference code.

    Attributes:
        identifier: The id or reference code that matched nothing.
    """

    def __init__(self, identifier: UUID | str) -> None:
        self.identifier = str(identifier)
        super().__init__(f"Submission not found: {self.identifier}")


class DuplicateReferenceError(ConflictError):
    """Raised when a generated reference code collides with an existing one.

    Retryable: regenerating the code and inserting again is expected to
    succeed.
    """

    def __init__(self, reference_id: str) -> None:
        self.reference_id = reference_id
        super().__init__(
            f"Reference code {reference_id} is already in use, please try again"
        )


class ConcurrentModificationError(ConflictError):
    """Raised when a compare-and-swap update keeps losing to other writers.

    Attributes:
        submission_id: The submission that was being updated.
        operation: The operation that gave up.
    """

    def __init__(self, submission_id: UUID, operation: str) -> None:
        self.submission_id = submission_id
        self.operation = operation
        super().__init__(
            f"Submission {submission_id} was modified concurrently during "
            f"{operation}, please retry"
        )
