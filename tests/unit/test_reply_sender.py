"""Tests for reply delivery through the Send API."""

from __future__ import annotations

import logging

import httpx
import pytest

from src.webhook.models import HttpResult, OutboundReply
from src.webhook.sender import SEND_API_URL, ReplySender
from tests.conftest import RecordingHttpClient

_REPLY = OutboundReply(recipient_id="U1", text="Server is running")


class TestReplySenderRequest:
    @pytest.mark.asyncio
    async def test_posts_recipient_and_text(self) -> None:
        client = RecordingHttpClient()
        sender = ReplySender(client, page_access_token="tok")

        await sender.send(_REPLY)

        assert len(client.calls) == 1
        call = client.calls[0]
        assert call["url"] == SEND_API_URL
        assert call["body"] == {
            "recipient": {"id": "U1"},
            "message": {"text": "Server is running"},
        }

    @pytest.mark.asyncio
    async def test_token_sent_as_query_parameter(self) -> None:
        client = RecordingHttpClient()
        sender = ReplySender(client, page_access_token="tok")

        await sender.send(_REPLY)

        assert client.calls[0]["params"] == {"access_token": "tok"}

    @pytest.mark.asyncio
    async def test_custom_send_api_url(self) -> None:
        client = RecordingHttpClient()
        sender = ReplySender(client, "tok", send_api_url="http://vendor.test/send")

        await sender.send(_REPLY)

        assert client.calls[0]["url"] == "http://vendor.test/send"

    @pytest.mark.asyncio
    async def test_returns_decoded_body_on_success(self) -> None:
        body = {"recipient_id": "U1", "message_id": "mid.42"}
        client = RecordingHttpClient(result=HttpResult(status_code=200, body=body))
        sender = ReplySender(client, page_access_token="tok")

        assert await sender.send(_REPLY) == body


class TestReplySenderWithoutToken:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_no_network_call_without_token(self, token: str | None) -> None:
        client = RecordingHttpClient()
        sender = ReplySender(client, page_access_token=token)

        assert await sender.send(_REPLY) is None
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_intended_message_is_logged(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        sender = ReplySender(RecordingHttpClient(), page_access_token=None)

        with caplog.at_level(logging.INFO, logger="src.webhook.sender"):
            await sender.send(_REPLY)

        assert "Server is running" in caplog.text


class TestReplySenderFailures:
    @pytest.mark.asyncio
    async def test_error_status_is_absorbed(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        error_body = {"error": {"message": "Invalid OAuth access token"}}
        client = RecordingHttpClient(result=HttpResult(status_code=400, body=error_body))
        sender = ReplySender(client, page_access_token="tok")

        with caplog.at_level(logging.WARNING, logger="src.webhook.sender"):
            result = await sender.send(_REPLY)

        assert result is None
        assert "400" in caplog.text
        assert "Invalid OAuth access token" in caplog.text

    @pytest.mark.asyncio
    async def test_transport_error_is_absorbed(self) -> None:
        client = RecordingHttpClient(error=httpx.ConnectError("network unreachable"))
        sender = ReplySender(client, page_access_token="tok")

        assert await sender.send(_REPLY) is None

    @pytest.mark.asyncio
    async def test_invalid_url_is_absorbed(self) -> None:
        client = RecordingHttpClient(error=httpx.InvalidURL("bad"))
        sender = ReplySender(client, page_access_token="tok")

        assert await sender.send(_REPLY) is None
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_timeout_is_absorbed(self) -> None:
        client = RecordingHttpClient(error=httpx.ReadTimeout("timed out"))
        sender = ReplySender(client, page_access_token="tok")

        assert await sender.send(_REPLY) is None

    @pytest.mark.asyncio
    async def test_single_attempt_no_retry(self) -> None:
        client = RecordingHttpClient(result=HttpResult(status_code=500, body="oops"))
        sender = ReplySender(client, page_access_token="tok")

        await sender.send(_REPLY)

        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_token_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        client = RecordingHttpClient(result=HttpResult(status_code=500, body="oops"))
        sender = ReplySender(client, page_access_token="super-secret-token")

        with caplog.at_level(logging.DEBUG):
            await sender.send(_REPLY)

        assert "super-secret-token" not in caplog.text
