"""FastAPI application exposing the Messenger page webhook."""

from __future__ import annotations

import json
import logging
import os

from fastapi import BackgroundTasks, FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from src.botconfig.store import DEFAULT_CONFIG_PATH, load_bot_config
from src.models import BotConfig
from src.webhook.dispatcher import EventDispatcher, PayloadValidationError
from src.webhook.handshake import HandshakeValidator
from src.webhook.http_client import HttpxJsonClient, JsonPoster
from src.webhook.policy import ReplyPolicy
from src.webhook.sender import SEND_API_URL, ReplySender

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook"


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config_path = os.environ.get("BOT_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    config = load_bot_config(config_path)
    timeout = float(os.environ.get("SEND_TIMEOUT_SECONDS", "10"))
    send_api_url = os.environ.get("SEND_API_URL", SEND_API_URL)
    return create_app(
        config,
        http_client=HttpxJsonClient(timeout=timeout),
        send_api_url=send_api_url,
    )


def create_app(
    config: BotConfig,
    http_client: JsonPoster | None = None,
    send_api_url: str = SEND_API_URL,
) -> FastAPI:
    """Create the webhook app around an already-loaded config."""
    app = FastAPI(docs_url=None, redoc_url=None)

    handshake = HandshakeValidator(config.verify_token)
    sender = ReplySender(
        http_client or HttpxJsonClient(),
        config.page_access_token,
        send_api_url=send_api_url,
    )
    dispatcher = EventDispatcher(ReplyPolicy.from_config(config), sender)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(WEBHOOK_PATH)
    async def verify_webhook(request: Request) -> Response:
        try:
            result = handshake.handle(request.query_params)
        except Exception:
            logger.exception("Webhook verification failed")
            return Response(status_code=500)
        if result.status_code != 200:
            return Response(status_code=result.status_code)
        return PlainTextResponse(content=result.content)

    @app.post(WEBHOOK_PATH)
    async def receive_webhook(
        request: Request, background_tasks: BackgroundTasks,
    ) -> Response:
        try:
            payload = json.loads(await request.body())
            replies = dispatcher.plan(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, PayloadValidationError) as exc:
            logger.warning("Rejected webhook payload: %s", exc)
            return Response(status_code=400)
        except Exception:
            logger.exception("Webhook processing failed")
            return Response(status_code=500)

        if replies:
            background_tasks.add_task(dispatcher.deliver, replies)
        return JSONResponse({"status": "EVENT_RECEIVED"})

    return app
