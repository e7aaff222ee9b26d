"""Data models for the webhook event pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class TextMessage:
    sender_id: str | None
    text: str
    is_echo: bool = False


@dataclass(frozen=True)
class Attachment:
    sender_id: str | None
    count: int
    is_echo: bool = False


@dataclass(frozen=True)
class Postback:
    sender_id: str | None
    payload: str | None = None


@dataclass(frozen=True)
class UnknownEvent:
    raw_kind: str


InboundEvent = Union[TextMessage, Attachment, Postback, UnknownEvent]


@dataclass(frozen=True)
class OutboundReply:
    """A reply ready to be handed to the Send API."""

    recipient_id: str
    text: str


@dataclass
class HandshakeResult:
    """Outcome of a webhook verification request."""

    status_code: int
    content: str = ""


@dataclass
class HttpResult:
    """Status and decoded body of an outbound HTTP call."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
