"""Supabase adapters (PostgREST tables, Storage, Auth)."""

from desaconnect.infrastructure.adapters.supabase.admin_roster_repository import (
    SupabaseAdminRosterRepository,
)
from desaconnect.infrastructure.adapters.supabase.client import create_supabase_client
from desaconnect.infrastructure.adapters.supabase.file_storage import (
    SupabaseFileStorage,
)
from desaconnect.infrastructure.adapters.supabase.identity_provider import (
    SupabaseIdentityProvider,
)
from desaconnect.infrastructure.adapters.supabase.submission_repository import (
    SupabaseSubmissionRepository,
)

__all__: list[str] = [
    "SupabaseAdminRosterRepository",
    "SupabaseFileStorage",
    "SupabaseIdentityProvider",
    "SupabaseSubmissionRepository",
    "create_supabase_client",
]
