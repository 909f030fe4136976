"""Process-wide settings singleton."""

from __future__ import annotations

from desaconnect.config.settings import Settings, load_settings

_settings: Settings | None = None


def get_settings() -> Settings:
    """Load settings on first use.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set custom settings (testing/override)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget loaded settings (testing cleanup)."""
    global _settings
    _settings = None
