"""End-to-end tests for roster management."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from desaconnect.api.main import create_app
from desaconnect.bootstrap.settings import reset_settings
from desaconnect.infrastructure.stubs import IdentityProviderStub

pytestmark = pytest.mark.integration

KADES = "kades@desa.id"
SEKDES = "sekdes@desa.id"
BOOTSTRAP = "operator@desa.id"


@pytest.fixture
def bootstrap_client(
    monkeypatch: pytest.MonkeyPatch,
    identity_provider: IdentityProviderStub,
    login: Callable[[TestClient, str], None],
) -> TestClient:
    """Client logged in as an admin granted by ALLOWED_ADMIN_EMAILS only."""
    monkeypatch.setenv("ALLOWED_ADMIN_EMAILS", BOOTSTRAP)
    reset_settings()
    identity_provider.register_user(BOOTSTRAP, "rahasia-desa")
    client = TestClient(create_app(), raise_server_exceptions=False)
    login(client, BOOTSTRAP)
    return client


def test_list_admins_newest_first(admin_client: TestClient) -> None:
    body = admin_client.get("/v1/admin/roster").json()

    assert body["count"] == 2
    assert [admin["email"] for admin in body["admins"]] == [SEKDES, KADES]


def test_add_admin(admin_client: TestClient) -> None:
    created = admin_client.post("/v1/admin/roster", json={"email": " Bendahara@Desa.id "})
    duplicate = admin_client.post("/v1/admin/roster", json={"email": "bendahara@desa.id"})
    invalid = admin_client.post("/v1/admin/roster", json={"email": "bukan-email"})

    assert created.status_code == 201
    assert created.json()["email"] == "bendahara@desa.id"
    assert duplicate.status_code == 409
    assert invalid.status_code == 400
    assert invalid.json()["detail"]["field"] == "email"
    assert admin_client.get("/v1/admin/roster").json()["count"] == 3


def test_new_admin_can_log_in_immediately(
    admin_client: TestClient, login: Callable[[TestClient, str], None]
) -> None:
    # The failed login caches a negative decision that the add must drop.
    refused = admin_client.post(
        "/v1/admin/session", json={"email": "warga@desa.id", "password": "rahasia-desa"}
    )
    assert refused.status_code == 401

    admin_client.post("/v1/admin/roster", json={"email": "warga@desa.id"})

    login(admin_client, "warga@desa.id")
    assert admin_client.get("/v1/admin/stats").status_code == 200


def test_batch_add_reports_each_email(admin_client: TestClient) -> None:
    response = admin_client.post(
        "/v1/admin/roster/batch",
        json={"emails": ["rt01@desa.id", KADES, "tidak valid", "RT01@desa.id", "rt02@desa.id"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert [r["email"] for r in body["results"]] == [
        "rt01@desa.id",
        KADES,
        "tidak valid",
        "rt02@desa.id",
    ]
    assert [r["added"] for r in body["results"]] == [True, False, False, True]
    assert body["added_count"] == 2
    assert body["failed_count"] == 2


def test_batch_add_requires_emails(admin_client: TestClient) -> None:
    assert admin_client.post("/v1/admin/roster/batch", json={"emails": []}).status_code == 422


def test_cannot_remove_self(admin_client: TestClient) -> None:
    response = admin_client.delete(f"/v1/admin/roster/{KADES.upper()}")

    assert response.status_code == 409
    assert admin_client.get("/v1/admin/roster").json()["count"] == 2


def test_remove_unknown_admin(admin_client: TestClient) -> None:
    assert admin_client.delete("/v1/admin/roster/rw@desa.id").status_code == 404


def test_remove_clears_assignments(
    admin_client: TestClient, submit: Callable[..., str]
) -> None:
    reference_id = submit(admin_client)
    submission = admin_client.get(
        "/v1/admin/submissions", params={"search": reference_id}
    ).json()["items"][0]
    admin_client.patch(
        f"/v1/admin/submissions/{submission['id']}/assignment",
        json={"assigned_to": SEKDES},
    )

    response = admin_client.delete(f"/v1/admin/roster/{SEKDES}")

    assert response.status_code == 204
    after = admin_client.get(f"/v1/admin/submissions/{submission['id']}").json()
    assert after["assigned_to"] is None
    assert after["last_updated_by"] == KADES


def test_last_admin_cannot_be_removed(bootstrap_client: TestClient) -> None:
    assert bootstrap_client.delete(f"/v1/admin/roster/{SEKDES}").status_code == 204

    response = bootstrap_client.delete(f"/v1/admin/roster/{KADES}")

    assert response.status_code == 409
    assert response.json()["detail"]["title"] == "Last Admin Removal"
    assert bootstrap_client.get("/v1/admin/roster").json()["count"] == 1


def test_roster_is_admin_only(client: TestClient) -> None:
    assert client.get("/v1/admin/roster").status_code == 401
    assert client.post("/v1/admin/roster", json={"email": "x@desa.id"}).status_code == 401
