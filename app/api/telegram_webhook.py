"""Telegram webhook endpoint, receives updates from Telegram's servers.

Always answers 200 straight away; processing happens in a detached task.
When a webhook secret is configured, updates without the matching
X-Telegram-Bot-Api-Secret-Token header are dropped (still acknowledged).
"""

import hmac
import json
import logging

from fastapi import APIRouter, Depends, Request, Response

from app.config import Settings
from app.dependencies import get_settings, get_webhook_handler
from app.services.webhook_handler import TelegramWebhookHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["telegram"])


@router.post("/telegram")
async def telegram_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    handler: TelegramWebhookHandler | None = Depends(get_webhook_handler),
):
    """Acknowledge an incoming Telegram update and hand it off."""
    if handler is None:
        logger.error("Webhook received before the handler was started")
        return Response(status_code=200)

    expected = settings.telegram_webhook_secret
    if expected:
        token = request.headers.get("X-Telegram-Bot-Api-Secret-Token", "")
        if not hmac.compare_digest(token, expected):
            logger.warning("Dropping webhook with invalid secret token")
            return Response(status_code=200)

    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Dropping webhook with a non-JSON body")
        return Response(status_code=200)

    handler.handle(data)
    return Response(status_code=200)
