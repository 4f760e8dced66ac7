"""
Unit tests for booking email notifications.
Gmail HTTP calls go through httpx.MockTransport.
"""

import base64
import email
import json
from email import policy
from unittest.mock import AsyncMock

import httpx
import pytest

from notifications.dispatcher import NotificationDispatcher
from notifications.gmail import GmailClient
from notifications.templates import customer_email, detail_lines, owner_email
from utils.exceptions import NotificationError


def make_gmail(handler, **overrides):
    options = {
        "client_id": "client-id",
        "client_secret": "client-secret",
        "refresh_token": "refresh-token",
        "sender": "captain@example.com",
        "sender_name": "Captain Mike's Charters",
    }
    options.update(overrides)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GmailClient(http_client=http_client, **options)


def decode_raw(raw: str):
    padded = raw + "=" * (-len(raw) % 4)
    return email.message_from_bytes(base64.urlsafe_b64decode(padded), policy=policy.default)


class GmailRecorder:
    """MockTransport handler that records sent messages."""

    def __init__(self, token_status=200, send_status=200):
        self.token_status = token_status
        self.send_status = send_status
        self.token_requests = []
        self.sent = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url == GmailClient.TOKEN_URL:
            self.token_requests.append(dict(httpx.QueryParams(request.content.decode())))
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="invalid_grant")
            return httpx.Response(200, json={"access_token": "ya29.token", "expires_in": 3599})

        assert request.url == GmailClient.SEND_URL
        assert request.headers["Authorization"] == "Bearer ya29.token"
        if self.send_status != 200:
            return httpx.Response(self.send_status, text="quota exceeded")
        self.sent.append(decode_raw(json.loads(request.content)["raw"]))
        return httpx.Response(200, json={"id": "msg-1"})


# ========== Templates ==========


def test_detail_lines(sample_booking):
    assert detail_lines(sample_booking) == [
        "Date: Thursday, July 10, 2025",
        "Time: 6:00 AM – 12:00 PM",
        "Trip Type: Half-Day Morning (6 hours)",
        "Party Size: 4",
        "Name: John Smith",
        "Email: john@example.com",
        "Phone: (555) 123-4567",
    ]


def test_detail_lines_with_notes(sample_booking):
    booking = sample_booking.model_copy(update={"notes": "Kids on board"})
    assert detail_lines(booking)[-1] == "Notes: Kids on board"


def test_customer_email(sample_booking):
    content = customer_email(sample_booking, business_name="Captain Mike's Charters")
    assert content.subject == "Captain Mike's Charters - Booking Confirmed"
    assert content.text.startswith("Thanks for booking with Captain Mike's Charters!")
    assert "If you have any questions, reply to this email." in content.text
    assert "<li>Party Size: 4</li>" in content.html


def test_owner_email(sample_booking):
    content = owner_email(sample_booking, business_name="Captain Mike's Charters")
    assert content.subject == "New Booking – Captain Mike's Charters"
    assert content.text.startswith("New booking received.")


def test_html_is_escaped(sample_booking):
    booking = sample_booking.model_copy(update={"notes": "<b>bring beer</b>"})
    assert "&lt;b&gt;bring beer&lt;/b&gt;" in customer_email(booking).html


# ========== Gmail Client ==========


@pytest.mark.asyncio
async def test_send_uses_refresh_token_grant():
    recorder = GmailRecorder()
    gmail = make_gmail(recorder)

    await gmail.send("john@example.com", "Subject", "plain body", "<p>html body</p>")

    assert recorder.token_requests == [
        {
            "client_id": "client-id",
            "client_secret": "client-secret",
            "refresh_token": "refresh-token",
            "grant_type": "refresh_token",
        }
    ]
    message = recorder.sent[0]
    assert message["To"] == "john@example.com"
    assert message["Subject"] == "Subject"
    assert "captain@example.com" in message["From"]
    assert message.get_content_type() == "multipart/alternative"
    assert message.get_body(("plain",)).get_content().strip() == "plain body"
    assert message.get_body(("html",)).get_content().strip() == "<p>html body</p>"
    await gmail.close()


def test_raw_message_is_unpadded_base64url():
    gmail = make_gmail(GmailRecorder())
    raw = gmail.build_message("a@example.com", "Hi", "text", "<p>html</p>")
    assert "=" not in raw
    assert "+" not in raw and "/" not in raw


@pytest.mark.asyncio
async def test_missing_credentials():
    gmail = make_gmail(GmailRecorder(), refresh_token="")
    gmail.refresh_token = None

    with pytest.raises(NotificationError, match="Missing Gmail OAuth credentials"):
        await gmail.send("john@example.com", "Subject", "text", "html")


@pytest.mark.asyncio
async def test_missing_sender():
    gmail = make_gmail(GmailRecorder())
    gmail.sender = None

    with pytest.raises(NotificationError, match="Missing Gmail sender address"):
        await gmail.send("john@example.com", "Subject", "text", "html")


@pytest.mark.asyncio
async def test_token_failure():
    gmail = make_gmail(GmailRecorder(token_status=400))

    with pytest.raises(NotificationError, match="Failed to get access token: 400"):
        await gmail.send("john@example.com", "Subject", "text", "html")


@pytest.mark.asyncio
async def test_send_failure():
    gmail = make_gmail(GmailRecorder(send_status=429))

    with pytest.raises(NotificationError, match="Gmail send failed: 429"):
        await gmail.send("john@example.com", "Subject", "text", "html")


# ========== Dispatcher ==========


@pytest.mark.asyncio
async def test_dispatch_sends_customer_then_owner(sample_booking):
    recorder = GmailRecorder()
    dispatcher = NotificationDispatcher(make_gmail(recorder), owner_address="owner@example.com")

    task = dispatcher.dispatch(sample_booking)
    await task

    assert [message["To"] for message in recorder.sent] == ["john@example.com", "owner@example.com"]
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_dispatch_failure_is_swallowed(sample_booking, caplog):
    gmail = AsyncMock(spec=GmailClient)
    gmail.send.side_effect = NotificationError("Missing Gmail OAuth credentials.")
    dispatcher = NotificationDispatcher(gmail, owner_address="owner@example.com")

    await dispatcher.dispatch(sample_booking)

    assert "Notification for booking" in caplog.text
    gmail.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_dispatch_returns_before_sending(sample_booking):
    gmail = AsyncMock(spec=GmailClient)
    dispatcher = NotificationDispatcher(gmail, owner_address="owner@example.com")

    dispatcher.dispatch(sample_booking)
    assert dispatcher.pending == 1
    gmail.send.assert_not_awaited()

    await dispatcher.drain()
    assert gmail.send.await_count == 2
