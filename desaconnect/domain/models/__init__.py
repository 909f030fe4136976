"""Domain models for DesaConnect."""

from desaconnect.domain.models.admin_entry import (
    AdminEntry,
    BatchAddOutcome,
    BatchAddResult,
)
from desaconnect.domain.models.identity import (
    AdminIdentity,
    AuthMethod,
    RequestCredentials,
    ResolvedIdentity,
)
from desaconnect.domain.models.submission import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    SUGGESTED_CATEGORIES,
    InternalComment,
    Submission,
    SubmissionPriority,
    SubmissionStatus,
)
from desaconnect.domain.models.submission_query import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SortOrder,
    SubmissionPage,
    SubmissionQuery,
)
from desaconnect.domain.models.submission_stats import (
    MONTH_LABELS,
    MonthlyTrend,
    ProcessingTime,
    SubmissionStats,
)
from desaconnect.domain.models.uploaded_file import UploadedFile

__all__: list[str] = [
    "AdminEntry",
    "AdminIdentity",
    "AuthMethod",
    "BatchAddOutcome",
    "BatchAddResult",
    "DEFAULT_PAGE_SIZE",
    "DESCRIPTION_MAX_LENGTH",
    "DESCRIPTION_MIN_LENGTH",
    "InternalComment",
    "MAX_PAGE_SIZE",
    "MONTH_LABELS",
    "MonthlyTrend",
    "ProcessingTime",
    "RequestCredentials",
    "ResolvedIdentity",
    "SUGGESTED_CATEGORIES",
    "SortOrder",
    "Submission",
    "SubmissionPage",
    "SubmissionPriority",
    "SubmissionQuery",
    "SubmissionStats",
    "SubmissionStatus",
    "UploadedFile",
]
