"""Configuration for DesaConnect."""

from desaconnect.config.settings import (
    AuthConfig,
    Settings,
    StoreConfig,
    UploadConfig,
    load_settings,
)

__all__: list[str] = [
    "AuthConfig",
    "Settings",
    "StoreConfig",
    "UploadConfig",
    "load_settings",
]
