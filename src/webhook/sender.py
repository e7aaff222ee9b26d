"""Reply sender: delivers text replies through the Messenger Send API.

At most one attempt per reply. Every failure is logged and absorbed so the
caller is never blocked or crashed by delivery problems.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.webhook.http_client import JsonPoster
from src.webhook.models import OutboundReply

logger = logging.getLogger(__name__)

SEND_API_URL = "https://graph.facebook.com/v18.0/me/messages"


class ReplySender:
    """Sends OutboundReply objects to the vendor Send API."""

    def __init__(
        self,
        http_client: JsonPoster,
        page_access_token: str | None,
        send_api_url: str = SEND_API_URL,
    ) -> None:
        self._http = http_client
        self._page_access_token = page_access_token
        self._send_api_url = send_api_url

    @staticmethod
    def build_body(reply: OutboundReply) -> dict[str, Any]:
        return {
            "recipient": {"id": reply.recipient_id},
            "message": {"text": reply.text},
        }

    async def send(self, reply: OutboundReply) -> Any:
        """Send one reply; return the decoded response body, or None on any failure."""
        if not self._page_access_token:
            logger.info(
                "PAGE_ACCESS_TOKEN not set; would send to %s: %r",
                reply.recipient_id, reply.text,
            )
            return None

        try:
            result = await self._http.post_json(
                self._send_api_url,
                self.build_body(reply),
                params={"access_token": self._page_access_token},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(
                "Send API unreachable for recipient %s: %s", reply.recipient_id, exc,
            )
            return None

        if not result.ok:
            logger.warning(
                "Send API returned %s for recipient %s: %s",
                result.status_code, reply.recipient_id, result.body,
            )
            return None

        logger.debug("Reply delivered to %s", reply.recipient_id)
        return result.body
