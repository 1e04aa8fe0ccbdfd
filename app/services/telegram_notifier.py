import logging

from telegram import Bot

from app.config import Settings

logger = logging.getLogger(__name__)

# Telegram caps messages at 4096 chars; longer text is cut, never split
MAX_MESSAGE_LENGTH = 4000


def truncate(text: str) -> str:
    return text[:MAX_MESSAGE_LENGTH]


class TelegramNotifier:
    def __init__(self, settings: Settings, bot: Bot | None = None):
        self.bot = bot or Bot(token=settings.telegram_bot_token)
        self.chat_id = settings.telegram_chat_id

    async def send_message(self, text: str) -> bool:
        """Best-effort delivery to the operator chat. Never raises, never retries."""
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=truncate(text))
        except Exception:
            logger.exception("Failed to send Telegram message")
            return False
        return True

    async def send_error(self, text: str) -> bool:
        return await self.send_message(f"Error: {text}")

    async def set_webhook(self, url: str, secret_token: str | None = None) -> bool:
        logger.info("Setting Telegram webhook to %s", url)
        return await self.bot.set_webhook(url=url, secret_token=secret_token or None)

    async def get_webhook_info(self) -> dict:
        info = await self.bot.get_webhook_info()
        return info.to_dict()
