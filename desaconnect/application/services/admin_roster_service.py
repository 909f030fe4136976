"""Admin roster management.

Removal guards run in a fixed order so callers always get the same answer
for the same request:
1. Self-removal is refused regardless of roster size
2. The last remaining admin cannot be removed
3. The target must be on the roster

Every add or remove drops the affected email from the authorization cache
immediately, so the change is seen on the next request in this process.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from desaconnect.application.ports.admin_remover import (
    TransactionalAdminRemoverProtocol,
)
from desaconnect.application.ports.admin_roster_repository import (
    AdminRosterRepositoryProtocol,
)
from desaconnect.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.application.services.base import LoggingMixin
from desaconnect.domain.errors.admin import (
    AdminAlreadyExistsError,
    AdminNotFoundError,
    InvalidEmailError,
    LastAdminRemovalError,
    SelfRemovalError,
)
from desaconnect.domain.exceptions import (
    ConflictError,
    DependencyError,
    InvalidInputError,
)
from desaconnect.domain.models.admin_entry import (
    AdminEntry,
    BatchAddOutcome,
    BatchAddResult,
)
from desaconnect.domain.services.email import is_valid_email, normalize_email


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AdminRosterService(LoggingMixin):
    """Lists, adds and removes admins."""

    def __init__(
        self,
        roster_repository: AdminRosterRepositoryProtocol,
        submission_repository: SubmissionRepositoryProtocol,
        authorization_cache: AdminAuthorizationCache,
        clock: Callable[[], datetime] = _utc_now,
        transactional_remover: TransactionalAdminRemoverProtocol | None = None,
    ) -> None:
        """Initialize the roster service.

        Args:
            roster_repository: Admin allow-list storage.
            submission_repository: Used to clear references on removal.
            authorization_cache: Invalidated on every roster change.
            clock: Source of UTC timestamps.
            transactional_remover: Performs removal atomically when the
                store supports it; otherwise removal runs step by step.
        """
        self._roster = roster_repository
        self._submissions = submission_repository
        self._cache = authorization_cache
        self._clock = clock
        self._remover = transactional_remover
        self._init_logger(component="roster")

    async def list_admins(self) -> list[AdminEntry]:
        """Return all admins, newest first."""
        entries = await self._roster.list()
        return sorted(entries, key=lambda entry: entry.created_at, reverse=True)

    async def add_admin(self, caller: str, new_email: str) -> AdminEntry:
        """Grant admin access to an email.

        Args:
            caller: Email of the admin performing the change.
            new_email: Email to add (any casing).

        Returns:
            The created roster entry.

        Raises:
            InvalidEmailError: Not an email address.
            AdminAlreadyExistsError: Already on the roster.
        """
        if not is_valid_email(new_email):
            raise InvalidEmailError(str(new_email))
        email = normalize_email(new_email)
        log = self._log_operation(
            "add_admin", email=email, added_by=normalize_email(caller)
        )

        if await self._roster.get(email) is not None:
            log.info("admin_add_rejected", reason="duplicate")
            raise AdminAlreadyExistsError(email)

        entry = AdminEntry(email=email, created_at=self._clock())
        await self._roster.add(entry)
        self._cache.clear(email)
        log.info("admin_added")
        return entry

    async def add_admins(self, caller: str, emails: Iterable[str]) -> BatchAddResult:
        """Add several emails, each independently.

        Emails are normalized and de-duplicated (first occurrence wins).
        One failure never stops the rest.

        Returns:
            Outcome per distinct email, in request order.
        """
        seen: set[str] = set()
        outcomes: list[BatchAddOutcome] = []
        for raw in emails:
            email = normalize_email(raw) if isinstance(raw, str) else str(raw)
            if email in seen:
                continue
            seen.add(email)
            try:
                await self.add_admin(caller, email)
            except (InvalidInputError, ConflictError) as e:
                outcomes.append(BatchAddOutcome(email=email, added=False, error=str(e)))
            except DependencyError as e:
                self._log_operation("add_admins", email=email).error(
                    "admin_add_failed", error=str(e)
                )
                outcomes.append(
                    BatchAddOutcome(
                        email=email, added=False, error="Could not reach the store"
                    )
                )
            else:
                outcomes.append(BatchAddOutcome(email=email, added=True))

        result = BatchAddResult(outcomes=tuple(outcomes))
        self._log_operation("add_admins", added_by=normalize_email(caller)).info(
            "admin_batch_added",
            added=len(result.added),
            failed=len(result.failed),
        )
        return result

    async def remove_admin(self, caller: str, target: str) -> None:
        """Revoke admin access.

        Clears submission assignments and last-updated-by references to the
        target before deleting the roster row. Without a transactional
        remover a failure part-way leaves references cleared but the row in
        place; cleanup is idempotent, so retrying completes the removal.

        Raises:
            SelfRemovalError: caller == target.
            LastAdminRemovalError: Roster has one entry or fewer.
            AdminNotFoundError: Target not on the roster.
            StoreUnavailableError: A store step failed.
        """
        caller_email = normalize_email(caller)
        target_email = normalize_email(target)
        log = self._log_operation(
            "remove_admin", email=target_email, removed_by=caller_email
        )

        if caller_email == target_email:
            log.info("admin_remove_rejected", reason="self_removal")
            raise SelfRemovalError(target_email)

        if self._remover is not None:
            cleared = await self._remover.remove_admin(target_email)
        else:
            cleared = await self._remove_sequentially(target_email)

        self._cache.clear(target_email)
        log.info("admin_removed", references_cleared=cleared)

    async def _remove_sequentially(self, target_email: str) -> int:
        admin_count = await self._roster.count()
        if admin_count <= 1:
            raise LastAdminRemovalError(admin_count)
        if await self._roster.get(target_email) is None:
            raise AdminNotFoundError(target_email)

        cleared = await self._submissions.clear_admin_references(target_email)
        if not await self._roster.remove(target_email):
            raise AdminNotFoundError(target_email)
        return cleared
