"""Query and paging value objects for listing submissions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from desaconnect.domain.models.submission import (
    Submission,
    SubmissionPriority,
    SubmissionStatus,
)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class SortOrder(Enum):
    """Ordering by creation time."""

    NEWEST_FIRST = "desc"
    OLDEST_FIRST = "asc"


@dataclass(frozen=True)
class SubmissionQuery:
    """Filters for the admin submission list.

    Exact-match filters are combined with AND. The search term matches a
    case-insensitive substring of the reference code, name or description.

    Attributes:
        status: Only submissions with this status.
        category: Only submissions with this exact category.
        priority: Only submissions with this priority.
        search: Substring to look for.
        sort: Creation-time ordering (newest first by default).
    """

    status: SubmissionStatus | None = None
    category: str | None = None
    priority: SubmissionPriority | None = None
    search: str | None = None
    sort: SortOrder = SortOrder.NEWEST_FIRST

    def matches(self, submission: Submission) -> bool:
        """Check a submission against the filters (used by in-memory stores)."""
        if self.status is not None and submission.status is not self.status:
            return False
        if self.category is not None and submission.category != self.category:
            return False
        if self.priority is not None and submission.priority is not self.priority:
            return False
        if self.search:
            term = self.search.lower()
            haystacks = (
                submission.reference_id,
                submission.name or "",
                submission.description,
            )
            if not any(term in value.lower() for value in haystacks):
                return False
        return True


@dataclass(frozen=True)
class SubmissionPage:
    """One page of a filtered submission list.

    Attributes:
        items: Submissions on this page.
        total_count: Size of the whole filtered set, not just this page.
        page: 1-indexed page number.
        page_size: Requested page size.
    """

    items: list[Submission] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        """Number of pages needed for the filtered set."""
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0
