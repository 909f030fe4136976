"""Unit tests for PostgresAdminRemover with a mocked session factory."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from desaconnect.domain.errors.admin import AdminNotFoundError, LastAdminRemovalError
from desaconnect.domain.errors.dependency import StoreUnavailableError
from desaconnect.infrastructure.adapters.persistence import PostgresAdminRemover


def _result(rows: list[tuple[Any, ...]]) -> MagicMock:
    result = MagicMock()
    result.fetchall.return_value = rows
    return result


def _async_cm(value: Any) -> MagicMock:
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=value)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    session.begin.return_value = _async_cm(None)
    return session


@pytest.fixture
def remover(session: MagicMock) -> PostgresAdminRemover:
    factory = MagicMock(return_value=_async_cm(session))
    return PostgresAdminRemover(factory)


def _statements(session: MagicMock) -> list[str]:
    return [str(call.args[0]) for call in session.execute.call_args_list]


@pytest.mark.asyncio
async def test_removes_and_clears_references(
    remover: PostgresAdminRemover, session: MagicMock
) -> None:
    session.execute.side_effect = [
        _result([("kades@desa.id",), ("sekdes@desa.id",)]),
        _result([("id-1",), ("id-2",)]),
        _result([("id-2",), ("id-3",)]),
        _result([]),
    ]

    cleared = await remover.remove_admin("sekdes@desa.id")

    assert cleared == 3
    statements = _statements(session)
    assert statements[0] == 'SELECT lower(email) FROM "admin_list" FOR UPDATE'
    assert "SET assigned_to = NULL" in statements[1]
    assert "SET last_updated_by = NULL" in statements[2]
    assert statements[3].startswith('DELETE FROM "admin_list"')
    assert session.execute.call_args_list[3].args[1] == {"email": "sekdes@desa.id"}


@pytest.mark.asyncio
async def test_refuses_last_admin(
    remover: PostgresAdminRemover, session: MagicMock
) -> None:
    session.execute.side_effect = [_result([("kades@desa.id",)])]

    with pytest.raises(LastAdminRemovalError):
        await remover.remove_admin("kades@desa.id")
    assert session.execute.await_count == 1


@pytest.mark.asyncio
async def test_unknown_target(remover: PostgresAdminRemover, session: MagicMock) -> None:
    session.execute.side_effect = [
        _result([("kades@desa.id",), ("sekdes@desa.id",)])
    ]

    with pytest.raises(AdminNotFoundError):
        await remover.remove_admin("bendahara@desa.id")


@pytest.mark.asyncio
async def test_database_error_is_store_unavailable(
    remover: PostgresAdminRemover, session: MagicMock
) -> None:
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

    with pytest.raises(StoreUnavailableError):
        await remover.remove_admin("sekdes@desa.id")


def test_rejects_unsafe_table_names() -> None:
    with pytest.raises(ValueError):
        PostgresAdminRemover(MagicMock(), admin_table="admin_list; DROP TABLE x")
