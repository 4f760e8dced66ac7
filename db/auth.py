"""
Admin sign-in through Supabase Auth.

Sessions are held in memory per Telegram chat. A separate Supabase client
is used so that signing in never changes the credentials of the data
client returned by ``get_db_client``.
"""

import logging
from typing import Any, Dict, Optional

from supabase import Client as SupabaseClientType
from supabase import create_client

from config import settings
from utils.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AdminAuth:
    """Email/password sign-in for admins, keyed by chat ID."""

    def __init__(self, client: Optional[SupabaseClientType] = None):
        self.client = client or create_client(settings.supabase_url, settings.supabase_key)
        self._sessions: Dict[int, Any] = {}

    async def sign_in(self, chat_id: int, email: str, password: str) -> Any:
        """
        Sign in and remember the session for ``chat_id``.

        Raises:
            AuthenticationError: With the provider's message on failure
        """
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email.strip(), "password": password}
            )
        except Exception as e:
            logger.warning(f"Admin sign-in failed for chat {chat_id}: {e}")
            raise AuthenticationError(str(e)) from e

        session = getattr(response, "session", None)
        if session is None:
            raise AuthenticationError("Invalid login credentials")

        self._sessions[chat_id] = session
        logger.info(f"Admin signed in from chat {chat_id}")
        return session

    def is_signed_in(self, chat_id: int) -> bool:
        return chat_id in self._sessions

    def sign_out(self, chat_id: int) -> None:
        if self._sessions.pop(chat_id, None) is not None:
            logger.info(f"Admin signed out from chat {chat_id}")


# Global auth instance
_admin_auth: Optional[AdminAuth] = None


def get_admin_auth() -> AdminAuth:
    """Get or create admin auth instance."""
    global _admin_auth
    if _admin_auth is None:
        _admin_auth = AdminAuth()
    return _admin_auth
