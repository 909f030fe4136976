"""Unit tests for loading settings from the environment."""

from pathlib import Path

import pytest

from desaconnect.config.settings import (
    DEFAULT_UPLOAD_MAX_BYTES,
    AuthConfig,
    Settings,
    StoreConfig,
    load_settings,
)
from desaconnect.domain.errors.dependency import ConfigurationError

_ENV_KEYS = (
    "DESACONNECT_STORE_BACKEND",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "SUPABASE_KEY",
    "SUPABASE_SUBMISSIONS_TABLE",
    "SUPABASE_ADMIN_TABLE",
    "SUPABASE_STORAGE_BUCKET",
    "DATABASE_URL",
    "ALLOWED_ADMIN_EMAILS",
    "ADMIN_SESSION_SECRET",
    "ADMIN_SESSION_MAX_AGE_SECONDS",
    "ADMIN_CACHE_TTL_SECONDS",
    "COOKIE_SECURE",
    "UPLOAD_MAX_BYTES",
    "ENVIRONMENT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestStoreConfig:
    def test_supabase_backend_requires_credentials(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
            StoreConfig.from_environment()

    def test_supabase_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        clean_env.setenv("SUPABASE_KEY", "anon-key")

        store = StoreConfig.from_environment()

        assert store.supabase_key == "anon-key"
        assert store.submissions_table == "submissions"
        assert store.admin_table == "admin_list"
        assert store.storage_bucket == "submission-files"
        assert store.database_url is None
        assert store.uses_memory is False

    def test_service_key_wins_over_anon_key(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        clean_env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        clean_env.setenv("SUPABASE_KEY", "anon-key")
        clean_env.setenv("SUPABASE_SERVICE_KEY", "service-key")

        assert StoreConfig.from_environment().supabase_key == "service-key"

    def test_memory_backend_needs_nothing(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("DESACONNECT_STORE_BACKEND", " Memory ")

        assert StoreConfig.from_environment().uses_memory is True

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationError):
            StoreConfig(backend="sqlite")


class TestAuthConfig:
    def test_secret_falls_back_to_store_key(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        store = StoreConfig(supabase_url="https://abc.supabase.co", supabase_key="k")

        auth = AuthConfig.from_environment(store, "production")

        assert auth.session_secret == "k"
        assert auth.session_secret_is_fallback is True
        assert auth.cookie_secure is True

    def test_explicit_values(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("ADMIN_SESSION_SECRET", "s3cret")
        clean_env.setenv("ADMIN_CACHE_TTL_SECONDS", "60")
        clean_env.setenv("ALLOWED_ADMIN_EMAILS", " Kades@Desa.id, ,sekdes@desa.id")
        clean_env.setenv("COOKIE_SECURE", "false")

        auth = AuthConfig.from_environment(StoreConfig(backend="memory"), "production")

        assert auth.session_secret == "s3cret"
        assert auth.session_secret_is_fallback is False
        assert auth.cache_ttl_seconds == 60
        assert auth.session_max_age_seconds == 86400
        assert auth.bootstrap_admin_emails == frozenset(
            {"kades@desa.id", "sekdes@desa.id"}
        )
        assert auth.cookie_secure is False

    def test_invalid_integer_uses_default(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("ADMIN_CACHE_TTL_SECONDS", "soon")

        auth = AuthConfig.from_environment(StoreConfig(backend="memory"), "development")

        assert auth.cache_ttl_seconds == 900
        assert auth.cookie_secure is False

    def test_rejects_non_positive_max_age(self) -> None:
        with pytest.raises(ConfigurationError):
            AuthConfig(session_secret="s", session_max_age_seconds=0)


def test_settings_from_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DESACONNECT_STORE_BACKEND", "memory")
    clean_env.setenv("ENVIRONMENT", "Staging")

    settings = Settings.from_environment()

    assert settings.environment == "staging"
    assert settings.upload.max_bytes == DEFAULT_UPLOAD_MAX_BYTES
    assert "application/pdf" in settings.upload.allowed_content_types


def test_load_settings_reads_dotenv(
    clean_env: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("DESACONNECT_STORE_BACKEND=memory\nUPLOAD_MAX_BYTES=1024\n")
    clean_env.setenv("UPLOAD_MAX_BYTES", "2048")

    settings = load_settings(str(env_file))

    assert settings.store.uses_memory is True
    assert settings.upload.max_bytes == 2048
