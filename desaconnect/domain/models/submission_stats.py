"""Aggregated submission statistics for the admin dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field

MONTH_LABELS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass
class MonthlyTrend:
    """Counts of submissions created in one calendar month."""

    month: str
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0


@dataclass(frozen=True)
class ProcessingTime:
    """Average handling times in days, with the sample sizes behind them."""

    average_resolution_days: float = 0.0
    average_response_days: float = 0.0
    resolved_count: int = 0
    responded_count: int = 0


@dataclass(frozen=True)
class SubmissionStats:
    """Dashboard statistics computed over all submissions.

    Attributes:
        total: Number of submissions.
        by_status: Count per status value; every status is present.
        by_category: Count per category observed in the data.
        monthly_trends: Twelve buckets, January to December of the year.
        processing_time: Resolution and response averages.
        year: Calendar year the monthly trends cover.
    """

    total: int
    by_status: dict[str, int]
    by_category: dict[str, int]
    monthly_trends: list[MonthlyTrend]
    processing_time: ProcessingTime
    year: int = field(default=0)
