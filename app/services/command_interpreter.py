"""Operator chat commands over the users collection.

Commands are matched exactly after trimming and lower-casing. Every reply is
a single message capped at MAX_MESSAGE_LENGTH. Store errors are raised as
CommandFailed so the caller can send them as an error reply.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from app.models.user import UserRecord
from app.services.telegram_notifier import truncate
from app.services.user_store import FieldPredicate, QueryFailure, StoreUnavailable, UserStore

logger = logging.getLogger(__name__)

STATUS_CONNECTED = "Firebase is connected and operational."
STATUS_NOT_INITIALIZED = "Firebase is not properly initialized."

NEW_USER_WINDOW = timedelta(hours=24)
EXPIRED_TRIAL_MIN_AGE = timedelta(days=3)
EXPIRED_TRIAL_MAX_AGE = timedelta(days=14)
INACTIVITY_THRESHOLD = timedelta(days=14)


class CommandFailed(Exception):
    """A store-backed command could not be answered."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_user_line(user: UserRecord) -> str:
    return f"{user.first_name or ''} {user.last_name or ''} - {user.email or 'No email'}"


def join_emails(users: list[UserRecord]) -> str:
    return "\n".join(u.email for u in users if u.email)


class CommandInterpreter:
    def __init__(self, store: UserStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock
        self._commands: dict[str, Callable[[], Awaitable[str]]] = {
            "/emails": self._handle_emails,
            "/unsubscribed": self._handle_unsubscribed,
            "/status": self._handle_status,
            "/newusers": self._handle_new_users,
            "/expiredtrial": self._handle_expired_trial,
            "/inactive": self._handle_inactive,
            "/help": self._handle_help,
        }

    @property
    def available_commands(self) -> list[str]:
        return list(self._commands)

    async def interpret(self, text: str) -> str:
        command = (text or "").strip().lower()
        handler = self._commands.get(command)
        if handler is None:
            logger.info("Command not recognized: %s", text)
            return truncate(
                f"Command not recognized: {(text or '').strip()}. "
                f"Available commands: {', '.join(self.available_commands)}"
            )

        logger.info("Processing %s command", command)
        return truncate(await handler())

    async def _run_query(self, what: str, predicates, render, empty: str) -> str:
        try:
            users = await self.store.query(predicates)
        except (StoreUnavailable, QueryFailure) as e:
            logger.error("Error getting %s: %s", what, e)
            raise CommandFailed(f"failed to get {what}: {e}") from e
        text = render(users)
        return text if text else empty

    async def _handle_emails(self) -> str:
        return await self._run_query("emails", (), join_emails, "No emails found.")

    async def _handle_unsubscribed(self) -> str:
        return await self._run_query(
            "unsubscribed users",
            (FieldPredicate("isSubscribed", "==", False),),
            join_emails,
            "No unsubscribed users.",
        )

    async def _handle_status(self) -> str:
        return STATUS_CONNECTED if self.store.available else STATUS_NOT_INITIALIZED

    async def _handle_new_users(self) -> str:
        since = self.clock() - NEW_USER_WINDOW
        return await self._run_query(
            "new users",
            (FieldPredicate("trialStartDate", ">=", since),),
            lambda users: "\n".join(format_user_line(u) for u in users),
            "No new users in the last 24h.",
        )

    async def _handle_expired_trial(self) -> str:
        now = self.clock()
        return await self._run_query(
            "users with expired trial",
            (
                FieldPredicate("isSubscribed", "==", False),
                FieldPredicate("trialStartDate", ">=", now - EXPIRED_TRIAL_MAX_AGE),
                FieldPredicate("trialStartDate", "<=", now - EXPIRED_TRIAL_MIN_AGE),
            ),
            lambda users: "\n".join(format_user_line(u) for u in users),
            "No users with expired trial.",
        )

    async def _handle_inactive(self) -> str:
        cutoff = self.clock() - INACTIVITY_THRESHOLD
        return await self._run_query(
            "inactive users",
            (FieldPredicate("lastActivityDate", "<=", cutoff),),
            join_emails,
            "No inactive users found.",
        )

    async def _handle_help(self) -> str:
        return "Available commands:\n" + "\n".join(self.available_commands)
