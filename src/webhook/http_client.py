"""Outbound JSON POST capability used by the reply sender."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from src.webhook.models import HttpResult

_DEFAULT_TIMEOUT_SECONDS = 10.0


class JsonPoster(Protocol):
    """Posts a JSON body; transport failures raise httpx.HTTPError or httpx.InvalidURL."""

    async def post_json(
        self,
        url: str,
        body: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> HttpResult: ...


class HttpxJsonClient:
    """JsonPoster backed by httpx.

    Transport failures surface as ``httpx.HTTPError`` or ``httpx.InvalidURL``.
    """

    def __init__(self, timeout: float = _DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    async def post_json(
        self,
        url: str,
        body: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> HttpResult:
        async with httpx.AsyncClient(verify=True) as client:
            resp = await client.post(
                url, json=body, params=params, timeout=self._timeout,
            )
            try:
                decoded: Any = resp.json()
            except ValueError:
                decoded = resp.text
            return HttpResult(status_code=resp.status_code, body=decoded)
