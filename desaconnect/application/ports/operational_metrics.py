"""Port for domain-level operational counters."""

from __future__ import annotations

from typing import Protocol


class OperationalMetricsProtocol(Protocol):
    """Counters services bump as they work."""

    def increment_submissions_created(self) -> None:
        """Count one successfully created submission."""
        ...

    def record_authorization_check(self, result: str) -> None:
        """Count an admin authorization decision.

        Args:
            result: One of "hit", "granted", "denied", "error".
        """
        ...
