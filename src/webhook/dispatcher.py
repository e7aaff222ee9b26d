"""Event dispatcher for Messenger page webhooks.

Validates the POST payload, walks ``entry[].messaging[]`` in received order,
classifies every event and turns it into at most one reply. Delivery happens
separately through ``deliver`` so the webhook can be acknowledged first.
"""

from __future__ import annotations

import logging
from typing import Any

from src.webhook.models import (
    Attachment,
    InboundEvent,
    OutboundReply,
    Postback,
    TextMessage,
    UnknownEvent,
)
from src.webhook.policy import ReplyPolicy
from src.webhook.sender import ReplySender

logger = logging.getLogger(__name__)

PAGE_OBJECT = "page"

# Keys present on every messaging event that say nothing about its kind
_ENVELOPE_KEYS = ("sender", "recipient", "timestamp")


class PayloadValidationError(Exception):
    """Raised when a webhook body is not a page event payload."""


def as_list(value: Any) -> list[dict[str, Any]]:
    """Coerce a single object, a list or nothing into a list of objects."""
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def _sender_id(event: dict[str, Any]) -> str | None:
    sender = event.get("sender")
    if not isinstance(sender, dict):
        return None
    sender_id = sender.get("id")
    if sender_id is None or sender_id == "":
        return None
    return str(sender_id)


def _attachment_count(message: dict[str, Any]) -> int:
    attachments = message.get("attachments")
    if isinstance(attachments, dict):
        return 1
    if isinstance(attachments, list):
        return len(attachments)
    return 0


def classify(event: dict[str, Any]) -> InboundEvent:
    """Classify one messaging event. Message beats postback; text beats attachments."""
    sender_id = _sender_id(event)

    message = event.get("message")
    if isinstance(message, dict):
        is_echo = bool(message.get("is_echo"))
        text = message.get("text")
        if isinstance(text, str) and text:
            return TextMessage(sender_id=sender_id, text=text, is_echo=is_echo)
        count = _attachment_count(message)
        if count:
            return Attachment(sender_id=sender_id, count=count, is_echo=is_echo)
        return UnknownEvent(raw_kind="message")

    postback = event.get("postback")
    if isinstance(postback, dict):
        payload = postback.get("payload")
        return Postback(
            sender_id=sender_id,
            payload=payload if isinstance(payload, str) else None,
        )

    kinds = [key for key in event if key not in _ENVELOPE_KEYS]
    return UnknownEvent(raw_kind=kinds[0] if kinds else "empty")


class EventDispatcher:
    """Turns a webhook POST payload into replies and delivers them."""

    def __init__(self, policy: ReplyPolicy, sender: ReplySender) -> None:
        self._policy = policy
        self._sender = sender

    def parse(self, payload: Any) -> list[InboundEvent]:
        if not isinstance(payload, dict):
            raise PayloadValidationError("Webhook body must be a JSON object")
        if payload.get("object") != PAGE_OBJECT:
            raise PayloadValidationError(
                f"Unsupported webhook object: {payload.get('object')!r}",
            )

        events: list[InboundEvent] = []
        for entry in as_list(payload.get("entry")):
            for raw_event in as_list(entry.get("messaging")):
                events.append(classify(raw_event))
        return events

    def plan(self, payload: Any) -> list[OutboundReply]:
        """Validate and classify the payload, returning replies in event order."""
        replies: list[OutboundReply] = []
        for event in self.parse(payload):
            if isinstance(event, UnknownEvent):
                logger.info("Ignoring unsupported event kind: %s", event.raw_kind)
                continue
            if isinstance(event, (TextMessage, Attachment)) and event.is_echo:
                logger.debug("Skipping echo of our own message")
                continue
            if not event.sender_id:
                logger.warning("Skipping %s event without sender id", type(event).__name__)
                continue
            reply = self._policy.decide(event)
            if reply is not None:
                replies.append(reply)
        return replies

    async def deliver(self, replies: list[OutboundReply]) -> None:
        """Send replies one after another; failures are absorbed by the sender."""
        for reply in replies:
            try:
                await self._sender.send(reply)
            except Exception:
                logger.exception("Reply delivery to %s crashed", reply.recipient_id)
