"""Submission repository port.

Defines the storage contract for citizen submissions. Implementations may
use Supabase (PostgREST) or in-memory storage.

Developer Golden Rules:
1. FAIL LOUD - repositories raise StoreUnavailableError, never return junk
2. NOT FOUND IS NOT AN ERROR - lookups return None; services decide
3. CAS FOR COMMENTS - use replace_comments() for the comment thread
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from desaconnect.domain.models.submission import InternalComment, Submission
from desaconnect.domain.models.submission_query import SubmissionQuery

# Fields update_fields() may write. Comments go through replace_comments().
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "status",
        "priority",
        "assigned_to",
        "last_updated_by",
        "first_responded_at",
        "updated_at",
    }
)


class SubmissionRepositoryProtocol(Protocol):
    """Protocol for submission persistence.

    Methods:
        save: Insert a new submission
        get: Fetch by internal id
        get_by_reference_id: Fetch by public reference code
        list: Filtered, ordered, paginated listing with total count
        list_all: Every submission (statistics scan)
        update_fields: Write a subset of mutable fields
        replace_comments: Compare-and-swap the comment thread
        clear_admin_references: Null out references to a removed admin
    """

    async def save(self, submission: Submission) -> None:
        """Insert a new submission.

        Raises:
            DuplicateReferenceError: If the reference code is already used.
            StoreUnavailableError: If the store fails.
        """
        ...

    async def get(self, submission_id: UUID) -> Submission | None:
        """Fetch a submission by internal id, or None if absent."""
        ...

    async def get_by_reference_id(self, reference_id: str) -> Submission | None:
        """Fetch a submission by its exact reference code, or None if absent."""
        ...

    async def list(
        self,
        query: SubmissionQuery,
        offset: int,
        limit: int,
    ) -> tuple[list[Submission], int]:
        """List submissions matching a query.

        Args:
            query: Filters, search term and sort order.
            offset: Number of matching rows to skip.
            limit: Maximum number of rows to return.

        Returns:
            Tuple of (page of submissions, total count of the filtered set).
        """
        ...

    async def list_all(self) -> list[Submission]:
        """Return every submission."""
        ...

    async def update_fields(
        self, submission: Submission, fields: Sequence[str]
    ) -> Submission:
        """Persist the named fields of submission and return the stored row.

        Args:
            submission: Submission carrying the new values.
            fields: Names from UPDATABLE_FIELDS to write.

        Raises:
            SubmissionNotFoundError: If the submission no longer exists.
            StoreUnavailableError: If the store fails.
        """
        ...

    async def replace_comments(
        self,
        submission_id: UUID,
        comments: Sequence[InternalComment],
        updated_at: datetime,
        expected_updated_at: datetime | None,
    ) -> Submission | None:
        """Replace the comment thread if nobody wrote since it was read.

        The write only happens when the stored updated_at still equals
        expected_updated_at.

        Returns:
            The updated submission, or None if the expectation failed.

        Raises:
            SubmissionNotFoundError: If the submission does not exist.
            StoreUnavailableError: If the store fails.
        """
        ...

    async def clear_admin_references(self, email: str) -> int:
        """Clear assigned_to / last_updated_by wherever they equal email.

        Idempotent. Returns the number of submissions touched.
        """
        ...
