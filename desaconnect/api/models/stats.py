"""Dashboard statistics response models."""

from pydantic import BaseModel

from desaconnect.domain.models.submission_stats import SubmissionStats


class MonthlyTrendResponse(BaseModel):
    month: str
    total: int
    pending: int
    in_progress: int
    resolved: int


class ProcessingTimeResponse(BaseModel):
    average_resolution_days: float
    average_response_days: float
    resolved_count: int
    responded_count: int


class StatsResponse(BaseModel):
    """Aggregated statistics over all submissions."""

    total: int
    by_status: dict[str, int]
    by_category: dict[str, int]
    monthly_trends: list[MonthlyTrendResponse]
    processing_time: ProcessingTimeResponse
    year: int

    @classmethod
    def from_domain(cls, stats: SubmissionStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            by_status=stats.by_status,
            by_category=stats.by_category,
            monthly_trends=[
                MonthlyTrendResponse(
                    month=t.month,
                    total=t.total,
                    pending=t.pending,
                    in_progress=t.in_progress,
                    resolved=t.resolved,
                )
                for t in stats.monthly_trends
            ],
            processing_time=ProcessingTimeResponse(
                average_resolution_days=stats.processing_time.average_resolution_days,
                average_response_days=stats.processing_time.average_response_days,
                resolved_count=stats.processing_time.resolved_count,
                responded_count=stats.processing_time.responded_count,
            ),
            year=stats.year,
        )
