"""
Gmail API client for sending booking emails.

Uses the OAuth refresh-token flow: each send exchanges the refresh token
for a short-lived access token, then posts a base64url-encoded MIME
message to the Gmail ``messages/send`` endpoint.
"""

import base64
import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import httpx

from config import settings
from utils.exceptions import NotificationError

logger = logging.getLogger(__name__)


class GmailClient:
    """Minimal Gmail sender over ``httpx``."""

    TOKEN_URL = "https://oauth2.googleapis.com/token"
    SEND_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        sender: Optional[str] = None,
        sender_name: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Gmail client. Missing arguments fall back to settings.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            refresh_token: Long-lived refresh token for the sender account
            sender: Sender address (the account that owns the token)
            sender_name: Display name on the From header
            http_client: Optional preconfigured ``httpx.AsyncClient``
        """
        self.client_id = client_id or settings.gmail_client_id
        self.client_secret = client_secret or settings.gmail_client_secret
        self.refresh_token = refresh_token or settings.gmail_refresh_token
        self.sender = sender or settings.gmail_user
        self.sender_name = sender_name or settings.business_name
        self.client = http_client or httpx.AsyncClient(timeout=30.0)

    async def get_access_token(self) -> str:
        if not (self.client_id and self.client_secret and self.refresh_token):
            raise NotificationError("Missing Gmail OAuth credentials.")

        try:
            response = await self.client.post(
                self.TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                    "grant_type": "refresh_token",
                },
            )
        except httpx.HTTPError as e:
            raise NotificationError(f"Failed to get access token: {e}") from e

        if response.status_code != 200:
            raise NotificationError(
                f"Failed to get access token: {response.status_code} {response.text}"
            )

        token = response.json().get("access_token")
        if not token:
            raise NotificationError("Failed to get access token: no access_token in response")
        return token

    def build_message(self, to: str, subject: str, text: str, html: str) -> str:
        """MIME multipart/alternative message, base64url-encoded without padding."""
        message = EmailMessage()
        message["From"] = formataddr((self.sender_name, self.sender))
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii").rstrip("=")

    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        """
        Send one email.

        Raises:
            NotificationError: Missing credentials or a non-2xx response
        """
        if not self.sender:
            raise NotificationError("Missing Gmail sender address.")

        access_token = await self.get_access_token()
        raw = self.build_message(to, subject, text, html)

        try:
            response = await self.client.post(
                self.SEND_URL,
                headers={"Authorization": f"Bearer {access_token}"},
                json={"raw": raw},
            )
        except httpx.HTTPError as e:
            raise NotificationError(f"Gmail send failed: {e}") from e

        if response.status_code >= 300:
            raise NotificationError(
                f"Gmail send failed: {response.status_code} {response.text}"
            )

        logger.info(f"Email sent to {to}: {subject}")

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
