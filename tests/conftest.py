"""Shared test fixtures for messenger-page-bot."""

from __future__ import annotations

from typing import Any

import pytest

from src.models import BotConfig
from src.webhook.models import HttpResult

# --- Factory functions for test data ---


def make_bot_config(**kwargs: Any) -> BotConfig:
    """Factory for BotConfig with sensible defaults."""
    defaults: dict[str, Any] = {
        "verify_token": "test_verify",
        "page_access_token": "test_page_token",
        "default_reply": "Hi there! How can I help you?",
        "commands": {
            "github": "Visit: https://github.com/",
            "help": "Available commands: github, help, status",
            "status": "Server is running",
        },
    }
    defaults.update(kwargs)
    return BotConfig(**defaults)


def make_page_payload(*events: dict[str, Any], object_: str = "page") -> dict[str, Any]:
    """Wrap messaging events in a single-entry page webhook body."""
    return {
        "object": object_,
        "entry": [{"id": "PAGE_ID", "time": 1700000000, "messaging": list(events)}],
    }


def make_text_event(
    text: str = "hello", sender_id: str = "U1", **message: Any,
) -> dict[str, Any]:
    return {
        "sender": {"id": sender_id},
        "recipient": {"id": "PAGE_ID"},
        "timestamp": 1700000000,
        "message": {"mid": "m_1", "text": text, **message},
    }


class RecordingHttpClient:
    """JsonPoster stub that records every call and replays canned results."""

    def __init__(
        self,
        result: HttpResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.calls: list[dict[str, Any]] = []
        self._result = result or HttpResult(
            status_code=200, body={"recipient_id": "U1", "message_id": "mid.1"},
        )
        self._error = error

    async def post_json(
        self,
        url: str,
        body: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> HttpResult:
        self.calls.append({"url": url, "body": body, "params": params})
        if self._error is not None:
            raise self._error
        return self._result


@pytest.fixture
def bot_config() -> BotConfig:
    return make_bot_config()


@pytest.fixture
def http_client() -> RecordingHttpClient:
    return RecordingHttpClient()
