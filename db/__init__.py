"""Database client and operations."""

from .auth import AdminAuth, get_admin_auth
from .supabase_client import SupabaseClient, get_db_client

__all__ = ["AdminAuth", "SupabaseClient", "get_admin_auth", "get_db_client"]
