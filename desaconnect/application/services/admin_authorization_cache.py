"""Admin authorization cache.

Answers "is this email an authorized admin?" with a process-local,
time-bounded memo in front of the roster so that every admin request does
not hit the store.

Decision order for an uncached email:
1. Bootstrap allow-list (ALLOWED_ADMIN_EMAILS)
2. Exact match in the admin roster

Failed roster lookups fail closed and are NOT cached, so a short store
outage does not lock admins out for a whole TTL window.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from desaconnect.application.ports.admin_roster_repository import (
    AdminRosterRepositoryProtocol,
)
from desaconnect.application.ports.operational_metrics import (
    OperationalMetricsProtocol,
)
from desaconnect.application.services.base import LoggingMixin
from desaconnect.domain.exceptions import DependencyError
from desaconnect.domain.services.email import normalize_email

DEFAULT_CACHE_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class CachedAuthorization:
    """One memoized authorization decision.

    Attributes:
        is_admin: The decision.
        cached_at: Monotonic timestamp of the lookup.
    """

    is_admin: bool
    cached_at: float

    def age(self, now: float) -> float:
        return now - self.cached_at


class AdminAuthorizationCache(LoggingMixin):
    """TTL cache of admin authorization decisions.

    Thread-safe: a lock guards the map, and store I/O happens outside it.
    Two concurrent misses for the same email may both query the roster;
    the last result written wins.
    """

    def __init__(
        self,
        roster_repository: AdminRosterRepositoryProtocol,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        bootstrap_emails: Iterable[str] = (),
        metrics: OperationalMetricsProtocol | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            roster_repository: Source of truth for the admin roster.
            ttl_seconds: How long a decision stays fresh.
            clock: Monotonic clock, injectable for tests.
            bootstrap_emails: Emails always treated as admins.
            metrics: Optional counter sink for authorization decisions.
        """
        self._roster = roster_repository
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._bootstrap_emails = frozenset(
            normalize_email(email) for email in bootstrap_emails
        )
        self._metrics = metrics
        self._entries: dict[str, CachedAuthorization] = {}
        self._lock = threading.Lock()
        self._init_logger(component="auth")

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    async def is_authorized_admin(self, email: object) -> bool:
        """Decide whether an email belongs to an authorized admin.

        Never raises: blank input is False, and a roster failure is logged
        and resolves False without being cached.

        Args:
            email: Candidate email, any casing or surrounding whitespace.

        Returns:
            True if the email is an admin.
        """
        if not isinstance(email, str) or not email.strip():
            return False

        normalized = normalize_email(email)
        log = self._log_operation("is_authorized_admin", email=normalized)

        now = self._clock()
        with self._lock:
            cached = self._entries.get(normalized)
        if cached is not None and cached.age(now) < self._ttl_seconds:
            log.debug("admin_cache_hit", is_admin=cached.is_admin)
            self._record("hit")
            return cached.is_admin

        if normalized in self._bootstrap_emails:
            log.debug("admin_bootstrap_match")
            self._store(normalized, True)
            self._record("granted")
            return True

        try:
            entry = await self._roster.get(normalized)
        except DependencyError as e:
            log.error("admin_lookup_failed", error=str(e))
            self._record("error")
            return False

        is_admin = entry is not None
        self._store(normalized, is_admin)
        log.info("admin_cache_refreshed", is_admin=is_admin)
        self._record("granted" if is_admin else "denied")
        return is_admin

    def clear(self, email: str | None = None) -> int:
        """Drop one cached decision, or all of them.

        Args:
            email: Email to forget; None clears everything.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            if email is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                removed = (
                    0 if self._entries.pop(normalize_email(email), None) is None else 1
                )
        self._log.info(
            "admin_cache_cleared",
            email=normalize_email(email) if email is not None else None,
            entries_cleared=removed,
        )
        return removed

    def snapshot(self) -> dict[str, CachedAuthorization]:
        """Return a copy of the current entries, including stale ones."""
        with self._lock:
            return dict(self._entries)

    def age_of(self, entry: CachedAuthorization) -> float:
        """Seconds since an entry was cached, by this cache's clock."""
        return entry.age(self._clock())

    def is_fresh(self, entry: CachedAuthorization) -> bool:
        return entry.age(self._clock()) < self._ttl_seconds

    def _store(self, email: str, is_admin: bool) -> None:
        with self._lock:
            self._entries[email] = CachedAuthorization(
                is_admin=is_admin, cached_at=self._clock()
            )

    def _record(self, result: str) -> None:
        if self._metrics is not None:
            self._metrics.record_authorization_check(result)
