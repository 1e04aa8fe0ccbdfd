"""Background new-user detection.

Polls Firestore every 30s for users whose trialStartDate is at or after the
watermark and sends one Telegram announcement per user. The watermark only
moves forward after a successful query, so a failed cycle is retried with
the same boundary. It starts at process start: users created while the
service was down are not announced.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from app.models.user import UserRecord
from app.services.command_interpreter import utc_now
from app.services.telegram_notifier import TelegramNotifier
from app.services.user_store import FieldPredicate, QueryFailure, UserStore

logger = logging.getLogger(__name__)


def format_new_user(user: UserRecord) -> str:
    return (
        "New user signed up!\n"
        f"Name: {user.display_name}\n"
        f"Email: {user.email or 'No email'}"
    )


class NewUserPoller:
    def __init__(
        self,
        store: UserStore,
        notifier: TelegramNotifier,
        poll_interval: float = 30.0,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.notifier = notifier
        self.poll_interval = poll_interval
        self.clock = clock
        self.watermark: datetime = clock()

    async def run_forever(self):
        """Main loop, runs until cancelled."""
        logger.info("NewUserPoller started (poll every %.0fs)", self.poll_interval)
        while True:
            try:
                await self.check_once()
            except asyncio.CancelledError:
                logger.info("NewUserPoller cancelled")
                raise
            except Exception:
                logger.exception("NewUserPoller error (will retry next cycle)")
            await asyncio.sleep(self.poll_interval)

    async def check_once(self) -> int:
        """Single poll. Returns the number of users announced."""
        if not self.store.available:
            return 0

        cycle_time = self.clock()
        try:
            users = await self.store.query(
                (FieldPredicate("trialStartDate", ">=", self.watermark),)
            )
        except QueryFailure as e:
            logger.warning(
                "New-user query failed, keeping watermark %s: %s",
                self.watermark.isoformat(), e,
            )
            return 0

        for user in users:
            logger.info("New user detected: %s", user.email or user.id)
            await self.notifier.send_message(format_new_user(user))

        self.watermark = max(self.watermark, cycle_time)
        return len(users)
