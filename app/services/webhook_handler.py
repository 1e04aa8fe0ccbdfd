"""Telegram webhook processing, detached from the HTTP acknowledgment.

Telegram retries deliveries that are not acknowledged quickly, so the route
answers 200 first and everything here runs in a background task. Updates
from any chat other than the configured one are dropped with a log line.
"""

from __future__ import annotations

import logging

from telegram import Bot, Update

from app.services.command_interpreter import CommandFailed, CommandInterpreter
from app.services.telegram_notifier import TelegramNotifier
from app.utils.chat_id import normalize_chat_id
from app.utils.task_runner import TaskRunner

logger = logging.getLogger(__name__)


def parse_update(data: dict, bot: Bot | None) -> Update | None:
    """Build a telegram Update from the webhook body, or None if it is not one."""
    if not isinstance(data, dict):
        logger.warning("Webhook body is not a JSON object")
        return None
    try:
        return Update.de_json(data, bot)
    except (TypeError, KeyError, ValueError) as e:
        logger.warning("Malformed Telegram update: %s", e)
        return None


class TelegramWebhookHandler:
    def __init__(
        self,
        interpreter: CommandInterpreter,
        notifier: TelegramNotifier,
        authorized_chat_id: str,
        runner: TaskRunner,
    ):
        self.interpreter = interpreter
        self.notifier = notifier
        self._allowed_chat_id = normalize_chat_id(authorized_chat_id)
        self.runner = runner

    def handle(self, data: dict):
        """Schedule processing and return immediately."""
        self.runner.submit(self.process_update(data), name="telegram-update")

    async def process_update(self, data: dict):
        try:
            logger.debug("Received webhook: %s", data)
            update = parse_update(data, self.notifier.bot)

            chat = update.effective_chat if update else None
            chat_id = normalize_chat_id(chat.id) if chat else None
            if chat_id is None:
                logger.error("No sender ID found in update")
                return

            if chat_id != self._allowed_chat_id:
                logger.warning("Unauthorized access attempt from %s", chat_id)
                return

            message = update.effective_message
            text = message.text if message else None
            if text is None:
                logger.info("Ignoring non-text message from %s", chat_id)
                return

            try:
                reply = await self.interpreter.interpret(text)
            except CommandFailed as e:
                await self.notifier.send_error(str(e))
                return
            await self.notifier.send_message(reply)
        except Exception:
            logger.exception("Error in webhook handler")
