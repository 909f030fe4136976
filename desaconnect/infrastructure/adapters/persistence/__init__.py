"""PostgreSQL persistence adapters (SQLAlchemy asyncio)."""

from desaconnect.infrastructure.adapters.persistence.admin_remover import (
    PostgresAdminRemover,
)

__all__: list[str] = ["PostgresAdminRemover"]
