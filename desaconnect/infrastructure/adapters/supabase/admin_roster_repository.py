"""Supabase-backed admin roster repository.

Emails are matched case-insensitively (ILIKE with escaped wildcards) so
rows written before emails were normalized are still found.
"""

from __future__ import annotations

from typing import Any

import httpx
from supabase import Client, PostgrestAPIError

from desaconnect.application.ports.admin_roster_repository import (
    AdminRosterRepositoryProtocol,
)
from desaconnect.domain.errors.admin import AdminAlreadyExistsError
from desaconnect.domain.errors.dependency import StoreUnavailableError
from desaconnect.domain.models.admin_entry import AdminEntry
from desaconnect.infrastructure.adapters.supabase.client import escape_like
from desaconnect.infrastructure.adapters.supabase.rows import row_to_admin
from desaconnect.infrastructure.observability.logging import get_logger_for_component

UNIQUE_VIOLATION = "23505"

_STORE_ERRORS = (PostgrestAPIError, httpx.HTTPError)


class SupabaseAdminRosterRepository(AdminRosterRepositoryProtocol):
    """Admin roster in a Supabase table with id, email and created_at."""

    def __init__(self, client: Client, table: str = "admin_list") -> None:
        self._client = client
        self._table = table
        self._log = get_logger_for_component(self.__class__.__name__)

    def _fail(self, operation: str, error: Exception) -> StoreUnavailableError:
        self._log.error("store_operation_failed", operation=operation, error=str(error))
        return StoreUnavailableError(operation, str(error))

    def _map(self, data: Any) -> list[AdminEntry]:
        entries = (row_to_admin(row) for row in data or [] if isinstance(row, dict))
        return [entry for entry in entries if entry is not None]

    async def list(self) -> list[AdminEntry]:
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("list_admins", e) from e
        return self._map(response.data)

    async def get(self, email: str) -> AdminEntry | None:
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .ilike("email", escape_like(email))
                .limit(1)
                .execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("get_admin", e) from e
        entries = self._map(response.data)
        return entries[0] if entries else None

    async def count(self) -> int:
        try:
            response = (
                self._client.table(self._table).select("id", count="exact").execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("count_admins", e) from e
        if response.count is not None:
            return response.count
        return len(response.data or [])

    async def add(self, entry: AdminEntry) -> None:
        try:
            self._client.table(self._table).insert(
                {"email": entry.email, "created_at": entry.created_at.isoformat()}
            ).execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise AdminAlreadyExistsError(entry.email) from e
            raise self._fail("add_admin", e) from e
        except httpx.HTTPError as e:
            raise self._fail("add_admin", e) from e

    async def remove(self, email: str) -> bool:
        try:
            response = (
                self._client.table(self._table)
                .delete()
                .ilike("email", escape_like(email))
                .execute()
            )
        except _STORE_ERRORS as e:
            raise self._fail("remove_admin", e) from e
        return bool(response.data)
