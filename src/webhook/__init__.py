"""Webhook pipeline for messenger-page-bot.

This module provides:
- Handshake verification
- Event classification and dispatch
- The reply policy
- Reply delivery through the Send API
"""

from src.webhook.dispatcher import EventDispatcher, PayloadValidationError, classify
from src.webhook.handshake import HandshakeValidator
from src.webhook.http_client import HttpxJsonClient, JsonPoster
from src.webhook.models import (
    Attachment,
    HandshakeResult,
    HttpResult,
    InboundEvent,
    OutboundReply,
    Postback,
    TextMessage,
    UnknownEvent,
)
from src.webhook.policy import ReplyPolicy, ReplyRule
from src.webhook.sender import ReplySender

__all__ = [
    "Attachment",
    "EventDispatcher",
    "HandshakeResult",
    "HandshakeValidator",
    "HttpResult",
    "HttpxJsonClient",
    "InboundEvent",
    "JsonPoster",
    "OutboundReply",
    "PayloadValidationError",
    "Postback",
    "ReplyPolicy",
    "ReplyRule",
    "ReplySender",
    "TextMessage",
    "UnknownEvent",
    "classify",
]
