"""Statistics aggregation for the admin dashboard.

Computes everything from a full scan of the submissions table on each
call. There is no materialized aggregate; the table is expected to stay
small (one village).
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from desaconnect.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from desaconnect.application.services.base import LoggingMixin
from desaconnect.domain.models.submission import Submission, SubmissionStatus
from desaconnect.domain.models.submission_stats import (
    MONTH_LABELS,
    MonthlyTrend,
    ProcessingTime,
    SubmissionStats,
)

SECONDS_PER_DAY = 24 * 60 * 60


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round half away from zero for non-negative values (2.25 -> 2.3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _days_between(start: datetime, end: datetime) -> float:
    """Elapsed days, floored at zero for clock skew or bad data."""
    return max(0.0, (end - start).total_seconds() / SECONDS_PER_DAY)


def _average_days(durations: list[float]) -> float:
    if not durations:
        return 0.0
    return round_half_up(sum(durations) / len(durations))


class StatisticsService(LoggingMixin):
    """Aggregates submission counts, trends and processing times."""

    def __init__(
        self,
        repository: SubmissionRepositoryProtocol,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the statistics service.

        Args:
            repository: Submission storage to scan.
            clock: Source of "now"; its year selects the monthly trend window.
        """
        self._repository = repository
        self._clock = clock
        self._init_logger(component="statistics")

    async def compute_stats(self) -> SubmissionStats:
        """Compute dashboard statistics over all submissions.

        Records with missing timestamps are skipped by the affected
        aggregate and never raise.
        """
        log = self._log_operation("compute_stats")
        submissions = await self._repository.list_all()
        year = self._clock().astimezone(timezone.utc).year

        by_status = {status.value: 0 for status in SubmissionStatus}
        by_category: Counter[str] = Counter()
        for submission in submissions:
            by_status[submission.status.value] += 1
            by_category[submission.category] += 1

        stats = SubmissionStats(
            total=len(submissions),
            by_status=by_status,
            by_category=dict(by_category),
            monthly_trends=self._monthly_trends(submissions, year),
            processing_time=self._processing_time(submissions),
            year=year,
        )
        log.info(
            "submission_stats_computed",
            total=stats.total,
            resolved_count=stats.processing_time.resolved_count,
        )
        return stats

    @staticmethod
    def _monthly_trends(
        submissions: Iterable[Submission], year: int
    ) -> list[MonthlyTrend]:
        trends = [MonthlyTrend(month=label) for label in MONTH_LABELS]
        for submission in submissions:
            if submission.created_at is None:
                continue
            created = submission.created_at.astimezone(timezone.utc)
            if created.year != year:
                continue
            bucket = trends[created.month - 1]
            bucket.total += 1
            if submission.status is SubmissionStatus.PENDING:
                bucket.pending += 1
            elif submission.status is SubmissionStatus.IN_PROGRESS:
                bucket.in_progress += 1
            else:
                bucket.resolved += 1
        return trends

    @staticmethod
    def _processing_time(submissions: Iterable[Submission]) -> ProcessingTime:
        resolution: list[float] = []
        response: list[float] = []
        for submission in submissions:
            created = submission.created_at
            if created is None:
                continue
            if (
                submission.status is SubmissionStatus.RESOLVED
                and submission.updated_at is not None
            ):
                resolution.append(_days_between(created, submission.updated_at))
            if submission.status is not SubmissionStatus.PENDING:
                first_response = submission.first_responded_at or submission.updated_at
                if first_response is not None:
                    response.append(_days_between(created, first_response))

        return ProcessingTime(
            average_resolution_days=_average_days(resolution),
            average_response_days=_average_days(response),
            resolved_count=len(resolution),
            responded_count=len(response),
        )
