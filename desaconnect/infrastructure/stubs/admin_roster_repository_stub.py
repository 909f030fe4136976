"""In-memory admin roster for development and testing."""

from __future__ import annotations

from desaconnect.application.ports.admin_roster_repository import (
    AdminRosterRepositoryProtocol,
)
from desaconnect.domain.errors.admin import AdminAlreadyExistsError
from desaconnect.domain.models.admin_entry import AdminEntry


class AdminRosterRepositoryStub(AdminRosterRepositoryProtocol):
    """In-memory implementation of AdminRosterRepositoryProtocol.

    Attributes:
        _entries: Mapping of normalized email to AdminEntry.
    """

    def __init__(self, entries: list[AdminEntry] | None = None) -> None:
        """Initialize the stub, optionally seeded with entries."""
        self._entries: dict[str, AdminEntry] = {}
        for entry in entries or []:
            self._entries[entry.email] = entry

    async def list(self) -> list[AdminEntry]:
        return sorted(
            self._entries.values(), key=lambda entry: entry.created_at, reverse=True
        )

    async def get(self, email: str) -> AdminEntry | None:
        return self._entries.get(email)

    async def count(self) -> int:
        return len(self._entries)

    async def add(self, entry: AdminEntry) -> None:
        if entry.email in self._entries:
            raise AdminAlreadyExistsError(entry.email)
        self._entries[entry.email] = entry

    async def remove(self, email: str) -> bool:
        return self._entries.pop(email, None) is not None

    def clear(self) -> None:
        """Remove all entries (testing helper)."""
        self._entries.clear()
