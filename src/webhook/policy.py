"""Reply policy: maps inbound events to canned replies.

Text is matched against an ordered rule table (greetings, then the configured
commands); the first full, case-insensitive match wins and anything else is
echoed back.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from src.models import BUILTIN_COMMANDS, DEFAULT_COMMANDS, BotConfig
from src.webhook.models import (
    Attachment,
    InboundEvent,
    OutboundReply,
    Postback,
    TextMessage,
)

logger = logging.getLogger(__name__)

GREETING_PATTERN = r"hi|hello|hey"
ECHO_TEMPLATE = 'You said: "{text}"'
ATTACHMENT_REPLY = "Sorry, attachments are not supported yet."
POSTBACK_TEMPLATE = "Postback received: {payload}"
POSTBACK_PLACEHOLDER = "(no payload)"


@dataclass(frozen=True)
class ReplyRule:
    name: str
    pattern: re.Pattern[str]
    reply: str


class ReplyPolicy:
    """Ordered (pattern, reply) rules with a fallback echo."""

    def __init__(self, rules: list[ReplyRule]) -> None:
        self._rules = rules

    @classmethod
    def from_config(cls, config: BotConfig) -> ReplyPolicy:
        rules = [
            ReplyRule(
                name="greeting",
                pattern=re.compile(GREETING_PATTERN, re.IGNORECASE),
                reply=config.default_reply,
            ),
        ]
        for keyword, reply in config.commands.items():
            rules.append(ReplyRule(
                name=keyword.lower(),
                pattern=re.compile(re.escape(keyword.strip()), re.IGNORECASE),
                reply=reply,
            ))
        for keyword in BUILTIN_COMMANDS:
            if config.command_reply(keyword) is None:
                rules.append(ReplyRule(
                    name=keyword,
                    pattern=re.compile(re.escape(keyword), re.IGNORECASE),
                    reply=DEFAULT_COMMANDS[keyword],
                ))
        return cls(rules)

    @property
    def rules(self) -> list[ReplyRule]:
        return list(self._rules)

    def reply_for_text(self, text: str) -> str | None:
        normalized = text.strip()
        if not normalized:
            return None
        for rule in self._rules:
            if rule.pattern.fullmatch(normalized):
                return rule.reply
        return ECHO_TEMPLATE.format(text=text)

    def decide(self, event: InboundEvent) -> OutboundReply | None:
        """Return the reply for one event, or None when it must go unanswered."""
        if isinstance(event, TextMessage):
            if event.is_echo or not event.sender_id:
                return None
            text = self.reply_for_text(event.text)
            if text is None:
                return None
            return OutboundReply(recipient_id=event.sender_id, text=text)

        if isinstance(event, Attachment):
            if event.is_echo or not event.sender_id:
                return None
            return OutboundReply(recipient_id=event.sender_id, text=ATTACHMENT_REPLY)

        if isinstance(event, Postback):
            if not event.sender_id:
                return None
            payload = event.payload or POSTBACK_PLACEHOLDER
            return OutboundReply(
                recipient_id=event.sender_id,
                text=POSTBACK_TEMPLATE.format(payload=payload),
            )

        logger.info("No reply for event: %s", event)
        return None
