"""Transactional admin removal on PostgreSQL.

Runs the whole removal in one transaction with every roster row locked:

    SELECT lower(email) FROM admin_list FOR UPDATE
    -- count and existence checks
    UPDATE submissions SET assigned_to = NULL WHERE assigned_to = :email
    UPDATE submissions SET last_updated_by = NULL WHERE last_updated_by = :email
    DELETE FROM admin_list WHERE lower(email) = :email

Two admins removing each other at the same time serialize on the lock,
so the second sees a roster of one and is refused.
"""

from __future__ import annotations

import re

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from desaconnect.application.ports.admin_remover import (
    TransactionalAdminRemoverProtocol,
)
from desaconnect.domain.errors.admin import AdminNotFoundError, LastAdminRemovalError
from desaconnect.domain.errors.dependency import StoreUnavailableError

logger = get_logger()

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _table_name(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid table name: {name!r}")
    return f'"{name}"'


class PostgresAdminRemover(TransactionalAdminRemoverProtocol):
    """Removes roster entries atomically through a direct database connection."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        admin_table: str = "admin_list",
        submissions_table: str = "submissions",
    ) -> None:
        """Initialize the remover.

        Args:
            session_factory: SQLAlchemy async session factory.
            admin_table: Roster table name.
            submissions_table: Submissions table name.
        """
        self._session_factory = session_factory
        self._admin_table = _table_name(admin_table)
        self._submissions_table = _table_name(submissions_table)

    async def remove_admin(self, target_email: str) -> int:
        log = logger.bind(component="admin_remover", email=target_email)
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    text(f"SELECT lower(email) FROM {self._admin_table} FOR UPDATE")
                )
                emails = [row[0] for row in result.fetchall()]
                if len(emails) <= 1:
                    raise LastAdminRemovalError(len(emails))
                if target_email not in emails:
                    raise AdminNotFoundError(target_email)

                cleared: set[str] = set()
                for column in ("assigned_to", "last_updated_by"):
                    updated = await session.execute(
                        text(
                            f"UPDATE {self._submissions_table} "
                            f"SET {column} = NULL "
                            f"WHERE {column} = :email RETURNING id"
                        ),
                        {"email": target_email},
                    )
                    cleared.update(str(row[0]) for row in updated.fetchall())

                await session.execute(
                    text(f"DELETE FROM {self._admin_table} WHERE lower(email) = :email"),
                    {"email": target_email},
                )
        except SQLAlchemyError as e:
            log.error("admin_remove_transaction_failed", error=str(e))
            raise StoreUnavailableError("remove_admin", str(e)) from e

        log.info("admin_remove_committed", references_cleared=len(cleared))
        return len(cleared)
