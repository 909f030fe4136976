"""Admin roster repository port."""

from __future__ import annotations

from typing import Protocol

from desaconnect.domain.models.admin_entry import AdminEntry


class AdminRosterRepositoryProtocol(Protocol):
    """Protocol for the admin allow-list table.

    Emails passed in are already normalized by the caller.
    """

    async def list(self) -> list[AdminEntry]:
        """Return all entries, newest first."""
        ...

    async def get(self, email: str) -> AdminEntry | None:
        """Return the entry for an email, or None.

        Raises:
            StoreUnavailableError: If the store fails.
        """
        ...

    async def count(self) -> int:
        """Return the number of roster entries."""
        ...

    async def add(self, entry: AdminEntry) -> None:
        """Insert an entry.

        Raises:
            AdminAlreadyExistsError: If the email is already present.
        """
        ...

    async def remove(self, email: str) -> bool:
        """Delete an entry. Returns False if nothing was deleted."""
        ...
