from fastapi import APIRouter

from app.api.health import router as health_router
from app.api.telegram_webhook import router as telegram_router
from app.api.webhook_admin import router as webhook_admin_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(telegram_router)
api_router.include_router(webhook_admin_router)
