"""Supabase client construction."""

from __future__ import annotations

from supabase import Client, create_client

from desaconnect.config.settings import StoreConfig
from desaconnect.domain.errors.dependency import ConfigurationError


def create_supabase_client(config: StoreConfig) -> Client:
    """Create a Supabase client from store configuration.

    Raises:
        ConfigurationError: If the URL or key is missing.
    """
    if not config.supabase_url or not config.supabase_key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required")
    return create_client(config.supabase_url, config.supabase_key)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def sanitize_search_term(value: str) -> str:
    """Make a search term safe inside a PostgREST or=(...) filter.

    Commas and parentheses delimit the filter list and are dropped.
    """
    cleaned = "".join(ch for ch in value if ch not in ",()")
    return escape_like(cleaned.strip())
