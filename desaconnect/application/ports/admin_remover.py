"""Transactional admin removal port.

A remover performs the whole removal (count check, reference cleanup and
delete) atomically, with the roster locked against concurrent removals.
"""

from __future__ import annotations

from typing import Protocol


class TransactionalAdminRemoverProtocol(Protocol):
    """Removes a roster entry in a single transaction."""

    async def remove_admin(self, target_email: str) -> int:
        """Remove target_email and clear submission references to it.

        Returns:
            Number of submissions whose references were cleared.

        Raises:
            LastAdminRemovalError: If the roster holds one entry or fewer.
            AdminNotFoundError: If target_email is not on the roster.
            StoreUnavailableError: If the transaction fails.
        """
        ...
