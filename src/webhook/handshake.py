"""Webhook verification handshake.

The platform proves webhook ownership with a GET carrying ``hub.mode``,
``hub.verify_token`` and ``hub.challenge``; the challenge is echoed back only
for a ``subscribe`` request with the right token.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping

from src.webhook.models import HandshakeResult

logger = logging.getLogger(__name__)


class HandshakeValidator:
    """Answers the GET verification challenge."""

    def __init__(self, verify_token: str) -> None:
        self._verify_token = verify_token

    def handle(self, params: Mapping[str, str]) -> HandshakeResult:
        mode = params.get("hub.mode")
        token = params.get("hub.verify_token")
        if mode is None or token is None:
            logger.warning("Webhook verification missing hub.mode or hub.verify_token")
            return HandshakeResult(status_code=400)

        # Constant-time comparison on the token
        token_ok = hmac.compare_digest(token.encode(), self._verify_token.encode())
        if mode == "subscribe" and token_ok:
            logger.info("Webhook verified")
            return HandshakeResult(
                status_code=200, content=params.get("hub.challenge", ""),
            )

        logger.warning("Webhook verification rejected (mode=%s)", mode)
        return HandshakeResult(status_code=403)
