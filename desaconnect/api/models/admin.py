"""Admin session, roster and debug API models."""

from pydantic import BaseModel, Field

from desaconnect.api.models.submission import DateTimeWithZ
from desaconnect.domain.models.admin_entry import AdminEntry, BatchAddResult


class LoginRequest(BaseModel):
    """Admin login form."""

    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6, max_length=256)


class SessionResponse(BaseModel):
    """Logged-in admin and where the client should go next."""

    email: str
    redirect_to: str = "/admin"


class AdminEntryResponse(BaseModel):
    email: str
    created_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, entry: AdminEntry) -> "AdminEntryResponse":
        return cls(email=entry.email, created_at=entry.created_at)


class AdminListResponse(BaseModel):
    admins: list[AdminEntryResponse]
    count: int


class AddAdminRequest(BaseModel):
    email: str = Field(..., max_length=320)


class BatchAddAdminsRequest(BaseModel):
    emails: list[str] = Field(..., min_length=1, max_length=100)


class BatchAddOutcomeResponse(BaseModel):
    email: str
    added: bool
    error: str | None = None


class BatchAddAdminsResponse(BaseModel):
    results: list[BatchAddOutcomeResponse]
    added_count: int
    failed_count: int

    @classmethod
    def from_domain(cls, result: BatchAddResult) -> "BatchAddAdminsResponse":
        return cls(
            results=[
                BatchAddOutcomeResponse(email=o.email, added=o.added, error=o.error)
                for o in result.outcomes
            ],
            added_count=len(result.added),
            failed_count=len(result.failed),
        )


class CacheEntryResponse(BaseModel):
    email: str
    is_admin: bool
    age_seconds: float
    fresh: bool


class AuthCacheResponse(BaseModel):
    ttl_seconds: float
    entries: list[CacheEntryResponse]


class CacheClearResponse(BaseModel):
    cleared: int


class AuthCheckRequest(BaseModel):
    email: str


class AuthCheckResponse(BaseModel):
    email: str
    is_admin: bool
    cache_cleared: bool
