"""
Pytest configuration and shared fixtures for DesaConnect tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Every test runs against the in-memory backend; singletons are reset
  between tests
"""

import os
from collections.abc import Iterator

import pytest

os.environ["DESACONNECT_STORE_BACKEND"] = "memory"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("ADMIN_SESSION_SECRET", "test-session-secret")

from desaconnect.api.dependencies.portal import reset_portal_dependencies  # noqa: E402
from desaconnect.bootstrap.metrics import reset_metrics  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons() -> Iterator[None]:
    """Give every test fresh services, stores and metrics."""
    reset_portal_dependencies()
    reset_metrics()
    yield
    reset_portal_dependencies()
    reset_metrics()


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from desaconnect import __version__

    return __version__
