"""Admin roster entry domain model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from desaconnect.domain.services.email import normalize_email


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class AdminEntry:
    """An email on the admin allow-list.

    Attributes:
        email: Normalized (trimmed, lower-cased) email, unique key.
        created_at: When access was granted.
    """

    email: str
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Store the email in normalized form."""
        object.__setattr__(self, "email", normalize_email(self.email))


@dataclass(frozen=True)
class BatchAddOutcome:
    """Result of adding one email in a batch.

    Attributes:
        email: Normalized email as attempted.
        added: Whether a new entry was created.
        error: Reason the email was not added, if any.
    """

    email: str
    added: bool
    error: str | None = None


@dataclass(frozen=True)
class BatchAddResult:
    """Per-email outcomes of a batch add, in request order."""

    outcomes: tuple[BatchAddOutcome, ...] = ()

    @property
    def added(self) -> list[str]:
        return [outcome.email for outcome in self.outcomes if outcome.added]

    @property
    def failed(self) -> list[BatchAddOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.added]
