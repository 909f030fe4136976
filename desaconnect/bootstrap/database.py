"""Database session factory bootstrap (PostgreSQL via SQLAlchemy).

Only used for the transactional admin remover; everything else talks to
Supabase over PostgREST.

Usage:
    from desaconnect.bootstrap.database import get_session_factory

    session_factory = get_session_factory(settings.store.database_url)
    async with session_factory() as session:
        ...
"""

from __future__ import annotations

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

logger = get_logger()

_session_factory: async_sessionmaker[AsyncSession] | None = None
_engine: AsyncEngine | None = None


def get_database_url(url: str | None) -> str:
    """Convert a PostgreSQL URL to the asyncpg dialect.

    Raises:
        ValueError: If no URL is given.
    """
    if not url:
        raise ValueError("DATABASE_URL is not set")

    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif not url.startswith("postgresql+asyncpg://"):
        url = f"postgresql+asyncpg://{url}"

    return url


def _mask_password(url: str) -> str:
    if "@" not in url:
        return url
    before_at, after_at = url.split("@", 1)
    if ":" in before_at.split("//", 1)[-1]:
        user_part = before_at.rsplit(":", 1)[0]
        return f"{user_part}:***@{after_at}"
    return url


def get_session_factory(url: str | None) -> async_sessionmaker[AsyncSession]:
    """Get the SQLAlchemy async session factory, creating it on first call.

    Raises:
        ValueError: If no URL is given.
    """
    global _session_factory, _engine

    if _session_factory is None:
        log = logger.bind(component="database_bootstrap")
        async_url = get_database_url(url)
        log.info("creating_database_engine", url=_mask_password(async_url))

        _engine = create_async_engine(
            async_url,
            echo=os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes"),
            pool_pre_ping=True,
        )
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        log.info("database_session_factory_created")

    return _session_factory


def reset_database_bootstrap() -> None:
    """Reset database singleton for testing."""
    global _session_factory, _engine
    _session_factory = None
    _engine = None


async def close_database_engine() -> None:
    """Close the database engine (for graceful shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
