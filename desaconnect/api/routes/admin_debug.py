"""Admin debug routes for the authorization cache.

Lets an admin see what the cache currently believes, drop entries, and
force a fresh roster lookup for one email.
"""

import structlog
from fastapi import APIRouter, Depends, Query

from desaconnect.api.auth.admin_guard import require_admin
from desaconnect.api.dependencies.portal import get_admin_authorization_cache
from desaconnect.api.models.admin import (
    AuthCacheResponse,
    AuthCheckRequest,
    AuthCheckResponse,
    CacheClearResponse,
    CacheEntryResponse,
)
from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.domain.models.identity import AdminIdentity
from desaconnect.domain.services.email import normalize_email

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/admin/debug", tags=["admin-debug"])


@router.get("/auth-cache", response_model=AuthCacheResponse)
async def view_auth_cache(
    admin: AdminIdentity = Depends(require_admin),
    cache: AdminAuthorizationCache = Depends(get_admin_authorization_cache),
) -> AuthCacheResponse:
    """Every cached decision with its age, stale entries included."""
    entries = [
        CacheEntryResponse(
            email=email,
            is_admin=entry.is_admin,
            age_seconds=round(cache.age_of(entry), 3),
            fresh=cache.is_fresh(entry),
        )
        for email, entry in sorted(cache.snapshot().items())
    ]
    return AuthCacheResponse(ttl_seconds=cache.ttl_seconds, entries=entries)


@router.delete("/auth-cache", response_model=CacheClearResponse)
async def clear_auth_cache(
    email: str | None = Query(default=None, description="Clear only this email"),
    admin: AdminIdentity = Depends(require_admin),
    cache: AdminAuthorizationCache = Depends(get_admin_authorization_cache),
) -> CacheClearResponse:
    cleared = cache.clear(email if email and email.strip() else None)
    logger.info("admin_cache_cleared_by_admin", cleared=cleared, by=admin.email)
    return CacheClearResponse(cleared=cleared)


@router.post("/auth-check", response_model=AuthCheckResponse)
async def recheck_admin(
    body: AuthCheckRequest,
    admin: AdminIdentity = Depends(require_admin),
    cache: AdminAuthorizationCache = Depends(get_admin_authorization_cache),
) -> AuthCheckResponse:
    """Forget the cached decision for an email and look it up again."""
    email = normalize_email(body.email)
    cleared = cache.clear(email) > 0
    is_admin = await cache.is_authorized_admin(email)
    return AuthCheckResponse(email=email, is_admin=is_admin, cache_cleared=cleared)
