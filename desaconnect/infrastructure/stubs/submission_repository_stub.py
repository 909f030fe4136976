"""In-memory submission repository for development and testing.

NOT suitable for production use: state lives in the process and is lost on
restart.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from desaconnect.application.ports.submission_repository import (
    UPDATABLE_FIELDS,
    SubmissionRepositoryProtocol,
)
from desaconnect.domain.errors.submission import (
    DuplicateReferenceError,
    SubmissionNotFoundError,
)
from desaconnect.domain.models.submission import InternalComment, Submission
from desaconnect.domain.models.submission_query import SortOrder, SubmissionQuery


class SubmissionRepositoryStub(SubmissionRepositoryProtocol):
    """In-memory implementation of SubmissionRepositoryProtocol.

    Attributes:
        _submissions: Mapping of submission id to Submission.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._submissions: dict[UUID, Submission] = {}
        # Serializes compare-and-swap the way a row lock would.
        self._cas_lock = asyncio.Lock()

    async def save(self, submission: Submission) -> None:
        if submission.id in self._submissions:
            raise ValueError(f"Submission already exists: {submission.id}")
        if any(
            existing.reference_id == submission.reference_id
            for existing in self._submissions.values()
        ):
            raise DuplicateReferenceError(submission.reference_id)
        self._submissions[submission.id] = submission

    async def get(self, submission_id: UUID) -> Submission | None:
        return self._submissions.get(submission_id)

    async def get_by_reference_id(self, reference_id: str) -> Submission | None:
        for submission in self._submissions.values():
            if submission.reference_id == reference_id:
                return submission
        return None

    async def list(
        self,
        query: SubmissionQuery,
        offset: int,
        limit: int,
    ) -> tuple[list[Submission], int]:
        """Filter, sort by created_at and slice, like the SQL backend."""
        matching = [s for s in self._submissions.values() if query.matches(s)]
        matching.sort(
            key=lambda s: s.created_at,
            reverse=query.sort is SortOrder.NEWEST_FIRST,
        )
        return matching[offset : offset + limit], len(matching)

    async def list_all(self) -> list[Submission]:
        return list(self._submissions.values())

    async def update_fields(
        self, submission: Submission, fields: Sequence[str]
    ) -> Submission:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        async with self._cas_lock:
            current = self._submissions.get(submission.id)
            if current is None:
                raise SubmissionNotFoundError(submission.id)
            updated = replace(
                current, **{name: getattr(submission, name) for name in fields}
            )
            self._submissions[submission.id] = updated
            return updated

    async def replace_comments(
        self,
        submission_id: UUID,
        comments: Sequence[InternalComment],
        updated_at: datetime,
        expected_updated_at: datetime | None,
    ) -> Submission | None:
        async with self._cas_lock:
            current = self._submissions.get(submission_id)
            if current is None:
                raise SubmissionNotFoundError(submission_id)
            if current.updated_at != expected_updated_at:
                return None
            updated = replace(
                current, internal_comments=tuple(comments), updated_at=updated_at
            )
            self._submissions[submission_id] = updated
            return updated

    async def clear_admin_references(self, email: str) -> int:
        touched = 0
        for submission_id, submission in list(self._submissions.items()):
            if email in (submission.assigned_to, submission.last_updated_by):
                self._submissions[submission_id] = submission.without_admin_references(
                    email
                )
                touched += 1
        return touched

    def clear(self) -> None:
        """Remove all submissions (testing helper)."""
        self._submissions.clear()
