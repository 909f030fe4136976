"""Fixtures for end-to-end API tests against the in-memory backend.

The roster starts with two admins and the identity provider knows three
accounts: both admins and one ordinary villager.
"""

from collections.abc import Callable, Iterator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from desaconnect.api.main import create_app
from desaconnect.bootstrap.portal import (
    get_identity_provider,
    set_admin_roster_repository,
)
from desaconnect.domain.models.admin_entry import AdminEntry
from desaconnect.infrastructure.stubs import (
    AdminRosterRepositoryStub,
    IdentityProviderStub,
)

KADES = "kades@desa.id"
SEKDES = "sekdes@desa.id"
WARGA = "warga@desa.id"
PASSWORD = "rahasia-desa"


@pytest.fixture
def roster() -> AdminRosterRepositoryStub:
    roster = AdminRosterRepositoryStub(
        [
            AdminEntry(KADES, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            AdminEntry(SEKDES, created_at=datetime(2024, 2, 1, tzinfo=timezone.utc)),
        ]
    )
    set_admin_roster_repository(roster)
    return roster


@pytest.fixture
def identity_provider(roster: AdminRosterRepositoryStub) -> IdentityProviderStub:
    provider = get_identity_provider()
    assert isinstance(provider, IdentityProviderStub)
    for email in (KADES, SEKDES, WARGA):
        provider.register_user(email, PASSWORD)
    return provider


@pytest.fixture
def client(identity_provider: IdentityProviderStub) -> Iterator[TestClient]:
    with TestClient(create_app(), raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def login() -> Callable[[TestClient, str], None]:
    """Log a client in with the shared test password."""

    def _login(client: TestClient, email: str) -> None:
        response = client.post(
            "/v1/admin/session", json={"email": email, "password": PASSWORD}
        )
        assert response.status_code == 200, response.text

    return _login


@pytest.fixture
def admin_client(
    client: TestClient, login: Callable[[TestClient, str], None]
) -> TestClient:
    """Client holding an admin_session cookie for the village head."""
    login(client, KADES)
    return client


@pytest.fixture
def submit() -> Callable[..., str]:
    """File a valid submission and return its reference code."""

    def _submit(client: TestClient, **fields: str) -> str:
        data = {
            "category": "Infrastructure",
            "description": "Jalan desa berlubang di dekat balai desa",
            **fields,
        }
        response = client.post("/v1/submissions", data=data)
        assert response.status_code == 201, response.text
        return response.json()["reference_id"]

    return _submit
