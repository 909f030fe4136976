"""Unit tests for mapping domain errors to problem-details responses."""

from uuid import uuid4

import pytest
from starlette.requests import Request

from desaconnect.api.models.problem import (
    PROBLEM_TYPE_PREFIX,
    SERVICE_UNAVAILABLE_MESSAGE,
    problem_exception,
    status_for,
)
from desaconnect.domain.errors import (
    AdminAlreadyExistsError,
    InvalidStatusError,
    LastAdminRemovalError,
    NotAdminError,
    StoreUnavailableError,
    SubmissionNotFoundError,
)
from desaconnect.domain.exceptions import DesaConnectError


def _request(path: str = "/v1/admin/submissions") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": path,
            "query_string": b"",
            "headers": [],
        }
    )


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (InvalidStatusError("archived"), 400),
        (SubmissionNotFoundError("ABCD1234"), 404),
        (AdminAlreadyExistsError("kades@desa.id"), 409),
        (LastAdminRemovalError(1), 409),
        (NotAdminError(), 403),
        (StoreUnavailableError("list", "timeout"), 503),
    ],
)
def test_status_for_error_kind(error: DesaConnectError, status_code: int) -> None:
    assert status_for(error) == status_code


def test_problem_body_shape() -> None:
    exc = problem_exception(SubmissionNotFoundError(uuid4()), _request("/v1/x"))

    assert exc.status_code == 404
    assert exc.detail["type"] == f"{PROBLEM_TYPE_PREFIX}submission-not-found"
    assert exc.detail["title"] == "Submission Not Found"
    assert exc.detail["status"] == 404
    assert exc.detail["instance"] == "http://testserver/v1/x"


def test_invalid_input_names_the_field() -> None:
    exc = problem_exception(InvalidStatusError("archived"), _request())

    assert exc.status_code == 400
    assert exc.detail["field"] == "status"


def test_dependency_failure_hides_internal_message() -> None:
    exc = problem_exception(
        StoreUnavailableError("list", "password authentication failed"), _request()
    )

    assert exc.status_code == 503
    assert exc.detail["detail"] == SERVICE_UNAVAILABLE_MESSAGE
    assert "password" not in str(exc.detail)
