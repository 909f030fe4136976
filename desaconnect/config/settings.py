"""DesaConnect service configuration.

Settings are read from the environment (optionally seeded from a .env file
via python-dotenv) into frozen dataclasses once at startup.

Environment Variables (Store):
- SUPABASE_URL: Supabase project URL (required unless backend is memory)
- SUPABASE_SERVICE_KEY / SUPABASE_KEY: Supabase key (required unless memory)
- DESACONNECT_STORE_BACKEND: "supabase" (default) or "memory"
- SUPABASE_SUBMISSIONS_TABLE: Submissions table (default: submissions)
- SUPABASE_ADMIN_TABLE: Admin roster table (default: admin_list)
- SUPABASE_STORAGE_BUCKET: Attachment bucket (default: submission-files)
- DATABASE_URL: PostgreSQL URL enabling transactional admin removal

Environment Variables (Auth):
- ALLOWED_ADMIN_EMAILS: Comma-separated bootstrap admin emails
- ADMIN_SESSION_SECRET: Signing key for admin-session cookies
- ADMIN_SESSION_MAX_AGE_SECONDS: Cookie lifetime (default: 86400)
- ADMIN_CACHE_TTL_SECONDS: Authorization cache TTL (default: 900)
- COOKIE_SECURE: Mark cookies Secure (default: true in production)

Environment Variables (Upload):
- UPLOAD_MAX_BYTES: Attachment size limit (default: 5 MB)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from desaconnect.domain.errors.dependency import ConfigurationError

STORE_BACKEND_SUPABASE = "supabase"
STORE_BACKEND_MEMORY = "memory"

DEFAULT_UPLOAD_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable, falling back to default if unset or invalid."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_str_env(key: str) -> str | None:
    """Get a non-blank string environment variable, or None."""
    value = os.environ.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_email_list(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(
        email.strip().lower() for email in raw.split(",") if email.strip()
    )


@dataclass(frozen=True)
class StoreConfig:
    """Where submissions, the roster and attachments live.

    Attributes:
        backend: "supabase" or "memory".
        supabase_url: Supabase project URL.
        supabase_key: Service (or anon) key used by the server.
        submissions_table: Table holding submissions.
        admin_table: Table holding the admin roster.
        storage_bucket: Storage bucket for attachments.
        database_url: Direct PostgreSQL URL, enables transactional removal.
    """

    backend: str = STORE_BACKEND_SUPABASE
    supabase_url: str | None = None
    supabase_key: str | None = None
    submissions_table: str = "submissions"
    admin_table: str = "admin_list"
    storage_bucket: str = "submission-files"
    database_url: str | None = None

    def __post_init__(self) -> None:
        """Validate that the selected backend is fully configured."""
        if self.backend not in (STORE_BACKEND_SUPABASE, STORE_BACKEND_MEMORY):
            raise ConfigurationError(
                f"Unknown store backend {self.backend!r}, "
                f"expected {STORE_BACKEND_SUPABASE!r} or {STORE_BACKEND_MEMORY!r}"
            )
        if self.backend == STORE_BACKEND_SUPABASE:
            missing = [
                name
                for name, value in (
                    ("SUPABASE_URL", self.supabase_url),
                    ("SUPABASE_SERVICE_KEY", self.supabase_key),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(
                    f"Missing required configuration: {', '.join(missing)}"
                )

    @property
    def uses_memory(self) -> bool:
        return self.backend == STORE_BACKEND_MEMORY

    @classmethod
    def from_environment(cls) -> StoreConfig:
        """Create store config from environment variables.

        Raises:
            ConfigurationError: If the Supabase backend is selected and its
                URL or key is missing.
        """
        return cls(
            backend=(
                os.environ.get("DESACONNECT_STORE_BACKEND", STORE_BACKEND_SUPABASE)
                .strip()
                .lower()
            ),
            supabase_url=_get_str_env("SUPABASE_URL"),
            supabase_key=(
                _get_str_env("SUPABASE_SERVICE_KEY") or _get_str_env("SUPABASE_KEY")
            ),
            submissions_table=os.environ.get("SUPABASE_SUBMISSIONS_TABLE", "submissions"),
            admin_table=os.environ.get("SUPABASE_ADMIN_TABLE", "admin_list"),
            storage_bucket=os.environ.get("SUPABASE_STORAGE_BUCKET", "submission-files"),
            database_url=_get_str_env("DATABASE_URL"),
        )


@dataclass(frozen=True)
class AuthConfig:
    """Admin authentication settings.

    Attributes:
        session_secret: Key signing admin-session cookies.
        session_max_age_seconds: Admin-session lifetime.
        cache_ttl_seconds: Authorization cache freshness window.
        bootstrap_admin_emails: Emails always treated as admins.
        cookie_secure: Whether cookies carry the Secure flag.
        session_secret_is_fallback: True when the store key signs sessions.
    """

    session_secret: str
    session_max_age_seconds: int = 24 * 60 * 60
    cache_ttl_seconds: int = 15 * 60
    bootstrap_admin_emails: frozenset[str] = field(default_factory=frozenset)
    cookie_secure: bool = True
    session_secret_is_fallback: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.session_secret:
            raise ConfigurationError("ADMIN_SESSION_SECRET must not be empty")
        if self.session_max_age_seconds < 1:
            raise ConfigurationError(
                "ADMIN_SESSION_MAX_AGE_SECONDS must be positive, "
                f"got {self.session_max_age_seconds}"
            )
        if self.cache_ttl_seconds < 0:
            raise ConfigurationError(
                "ADMIN_CACHE_TTL_SECONDS must be non-negative, "
                f"got {self.cache_ttl_seconds}"
            )

    @classmethod
    def from_environment(cls, store: StoreConfig, environment: str) -> AuthConfig:
        """Create auth config from environment variables.

        Without ADMIN_SESSION_SECRET the store key signs sessions. The
        memory backend has no key either, so a fixed development secret is
        used there.
        """
        secret = _get_str_env("ADMIN_SESSION_SECRET")
        fallback = secret is None
        if secret is None:
            secret = store.supabase_key or "desaconnect-development-secret"
        return cls(
            session_secret=secret,
            session_max_age_seconds=_get_int_env(
                "ADMIN_SESSION_MAX_AGE_SECONDS", 24 * 60 * 60
            ),
            cache_ttl_seconds=_get_int_env("ADMIN_CACHE_TTL_SECONDS", 15 * 60),
            bootstrap_admin_emails=_parse_email_list(
                os.environ.get("ALLOWED_ADMIN_EMAILS")
            ),
            cookie_secure=_get_bool_env("COOKIE_SECURE", environment == "production"),
            session_secret_is_fallback=fallback,
        )


@dataclass(frozen=True)
class UploadConfig:
    """Attachment limits.

    Attributes:
        max_bytes: Largest accepted attachment.
        allowed_content_types: Accepted MIME types.
    """

    max_bytes: int = DEFAULT_UPLOAD_MAX_BYTES
    allowed_content_types: frozenset[str] = DEFAULT_ALLOWED_CONTENT_TYPES

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_bytes < 1:
            raise ConfigurationError(
                f"UPLOAD_MAX_BYTES must be positive, got {self.max_bytes}"
            )

    @classmethod
    def from_environment(cls) -> UploadConfig:
        return cls(max_bytes=_get_int_env("UPLOAD_MAX_BYTES", DEFAULT_UPLOAD_MAX_BYTES))


@dataclass(frozen=True)
class Settings:
    """All service settings."""

    store: StoreConfig
    auth: AuthConfig
    upload: UploadConfig
    environment: str = "development"

    @classmethod
    def from_environment(cls) -> Settings:
        """Build settings from the process environment.

        Raises:
            ConfigurationError: If required values are missing or invalid.
        """
        environment = os.environ.get("ENVIRONMENT", "development").strip().lower()
        store = StoreConfig.from_environment()
        return cls(
            store=store,
            auth=AuthConfig.from_environment(store, environment),
            upload=UploadConfig.from_environment(),
            environment=environment,
        )


def load_settings(env_file: str | None = ".env") -> Settings:
    """Load settings, seeding the environment from a .env file if present.

    Values already in the environment win over the file.

    Args:
        env_file: Path of the dotenv file, or None to skip it.

    Raises:
        ConfigurationError: If required values are missing or invalid.
    """
    if env_file is not None and os.path.exists(env_file):
        load_dotenv(env_file, override=False)
    return Settings.from_environment()
