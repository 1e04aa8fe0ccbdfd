from fastapi import Request

from app.config import Settings
from app.services.telegram_notifier import TelegramNotifier
from app.services.user_store import UserStore
from app.services.webhook_handler import TelegramWebhookHandler


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_notifier(request: Request) -> TelegramNotifier:
    return request.app.state.notifier


def get_webhook_handler(request: Request) -> TelegramWebhookHandler | None:
    return getattr(request.app.state, "webhook_handler", None)
