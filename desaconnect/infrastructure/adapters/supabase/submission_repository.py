"""Supabase-backed submission repository.

Uses the synchronous supabase client from async methods; each call is a
single short PostgREST round trip.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

import httpx
from supabase import Client, PostgrestAPIError

from desaconnect.application.ports.submission_repository import (
    UPDATABLE_FIELDS,
    SubmissionRepositoryProtocol,
)
from desaconnect.domain.errors.dependency import StoreUnavailableError
from desaconnect.domain.errors.submission import (
    DuplicateReferenceError,
    SubmissionNotFoundError,
)
from desaconnect.domain.models.submission import InternalComment, Submission
from desaconnect.domain.models.submission_query import SortOrder, SubmissionQuery
from desaconnect.infrastructure.adapters.supabase.client import sanitize_search_term
from desaconnect.infrastructure.adapters.supabase.rows import (
    comment_to_json,
    row_to_submission,
    submission_field_value,
    submission_to_row,
)
from desaconnect.infrastructure.observability.logging import get_logger_for_component

UNIQUE_VIOLATION = "23505"

_STORE_ERRORS = (PostgrestAPIError, httpx.HTTPError)


def _rows(data: Any) -> list[dict[str, Any]]:
    return [row for row in data or [] if isinstance(row, dict)]


class SupabaseSubmissionRepository(SubmissionRepositoryProtocol):
    """Submission storage in a Supabase (PostgREST) table."""

    def __init__(self, client: Client, table: str = "submissions") -> None:
        """Initialize the repository.

        Args:
            client: Supabase client authenticated with the service key.
            table: Submissions table name.
        """
        self._client = client
        self._table = table
        self._log = get_logger_for_component(self.__class__.__name__)

    def _query(self) -> Any:
        return self._client.table(self._table)

    def _map(self, data: Any) -> list[Submission]:
        mapped = (row_to_submission(row) for row in _rows(data))
        return [submission for submission in mapped if submission is not None]

    def _fail(self, operation: str, error: Exception) -> StoreUnavailableError:
        self._log.error("store_operation_failed", operation=operation, error=str(error))
        return StoreUnavailableError(operation, str(error))

    async def save(self, submission: Submission) -> None:
        try:
            self._query().insert(submission_to_row(submission)).execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateReferenceError(submission.reference_id) from e
            raise self._fail("save", e) from e
        except httpx.HTTPError as e:
            raise self._fail("save", e) from e

    async def get(self, submission_id: UUID) -> Submission | None:
        try:
            response = (
                self._query().select("*").eq("id", str(submission_id)).limit(1).execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("get", e) from e
        submissions = self._map(response.data)
        return submissions[0] if submissions else None

    async def get_by_reference_id(self, reference_id: str) -> Submission | None:
        try:
            response = (
                self._query()
                .select("*")
                .eq("reference_id", reference_id)
                .limit(1)
                .execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("get_by_reference_id", e) from e
        submissions = self._map(response.data)
        return submissions[0] if submissions else None

    async def list(
        self,
        query: SubmissionQuery,
        offset: int,
        limit: int,
    ) -> tuple[list[Submission], int]:
        builder = self._query().select("*", count="exact")
        if query.status is not None:
            builder = builder.eq("status", query.status.value)
        if query.category is not None:
            builder = builder.eq("category", query.category)
        if query.priority is not None:
            builder = builder.eq("priority", query.priority.value)
        if query.search:
            term = sanitize_search_term(query.search)
            if term:
                builder = builder.or_(
                    f"reference_id.ilike.%{term}%,"
                    f"name.ilike.%{term}%,"
                    f"description.ilike.%{term}%"
                )
        builder = builder.order(
            "created_at", desc=query.sort is SortOrder.NEWEST_FIRST
        ).range(offset, offset + limit - 1)

        try:
            response = builder.execute()
        except _STORE_ERRORS as e:
            raise self._fail("list", e) from e
        items = self._map(response.data)
        total = response.count if response.count is not None else len(items)
        return items, total

    async def list_all(self) -> list[Submission]:
        try:
            response = self._query().select("*").execute()
        except _STORE_ERRORS as e:
            raise self._fail("list_all", e) from e
        return self._map(response.data)

    async def update_fields(
        self, submission: Submission, fields: Sequence[str]
    ) -> Submission:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        payload = {name: submission_field_value(submission, name) for name in fields}
        try:
            response = (
                self._query().update(payload).eq("id", str(submission.id)).execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("update_fields", e) from e
        updated = self._map(response.data)
        if not updated:
            raise SubmissionNotFoundError(submission.id)
        return updated[0]

    async def replace_comments(
        self,
        submission_id: UUID,
        comments: Sequence[InternalComment],
        updated_at: datetime,
        expected_updated_at: datetime | None,
    ) -> Submission | None:
        payload = {
            "internal_comments": [comment_to_json(c) for c in comments],
            "updated_at": updated_at.isoformat(),
        }
        builder = self._query().update(payload).eq("id", str(submission_id))
        if expected_updated_at is None:
            builder = builder.is_("updated_at", "null")
        else:
            builder = builder.eq("updated_at", expected_updated_at.isoformat())
        try:
            response = builder.execute()
        except _STORE_ERRORS as e:
            raise self._fail("replace_comments", e) from e

        updated = self._map(response.data)
        if updated:
            return updated[0]
        # Nothing matched: either the row is gone or someone wrote first.
        if await self.get(submission_id) is None:
            raise SubmissionNotFoundError(submission_id)
        return None

    async def clear_admin_references(self, email: str) -> int:
        touched: set[str] = set()
        try:
            for column in ("assigned_to", "last_updated_by"):
                response = (
                    self._query().update({column: None}).eq(column, email).execute()
                )
                touched.update(str(row.get("id")) for row in _rows(response.data))
        except _STORE_ERRORS as e:
            raise self._fail("clear_admin_references", e) from e
        return len(touched)
