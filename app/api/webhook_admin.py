import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import Settings
from app.dependencies import get_notifier, get_settings
from app.models.schemas import WebhookSetupResponse
from app.services.telegram_notifier import TelegramNotifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


@router.get("/setup-webhook", response_model=WebhookSetupResponse)
async def setup_webhook(
    url: str | None = Query(None, description="Public base URL of this service"),
    notifier: TelegramNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    if not url:
        raise HTTPException(
            status_code=400,
            detail="Please provide a webhook URL as a query parameter",
        )

    webhook_url = f"{url.rstrip('/')}/telegram"
    try:
        ok = await notifier.set_webhook(
            webhook_url, secret_token=settings.telegram_webhook_secret,
        )
    except Exception as e:
        logger.exception("Error setting up webhook")
        raise HTTPException(status_code=500, detail=f"Error setting up webhook: {e}")

    logger.info("Webhook setup response for %s: %s", webhook_url, ok)
    return WebhookSetupResponse(ok=bool(ok), webhook_url=webhook_url)


@router.get("/webhook-info")
async def webhook_info(notifier: TelegramNotifier = Depends(get_notifier)):
    try:
        return await notifier.get_webhook_info()
    except Exception as e:
        logger.exception("Error getting webhook info")
        raise HTTPException(status_code=500, detail=f"Error getting webhook info: {e}")
