from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.models.user import UserRecord
from app.services.command_interpreter import CommandInterpreter
from app.services.user_store import StoreUnavailable
from app.services.webhook_handler import TelegramWebhookHandler
from app.utils.task_runner import TaskRunner

FIXED_NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


class FakeUserStore:
    """In-memory stand-in for UserStore that evaluates predicates itself."""

    _ops = {
        "==": lambda a, b: a == b,
        ">=": lambda a, b: a is not None and a >= b,
        "<=": lambda a, b: a is not None and a <= b,
    }

    def __init__(self, documents: list[dict] | None = None, available: bool = True):
        self.documents = list(documents or [])
        self.available = available
        self.queries: list[list] = []
        self.fail_with: Exception | None = None

    def add(self, **fields):
        self.documents.append(fields)

    async def query(self, predicates=(), collection=None):
        if not self.available:
            raise StoreUnavailable("Firebase not initialized properly")
        predicates = list(predicates)
        self.queries.append(predicates)
        if self.fail_with is not None:
            raise self.fail_with
        records = [
            UserRecord.from_document(str(i), doc) for i, doc in enumerate(self.documents)
        ]
        return [
            r for r in records
            if all(self._ops[p.op](r.get(p.field), p.value) for p in predicates)
        ]


@pytest.fixture
def settings():
    """Test settings with dummy values."""
    return Settings(
        telegram_bot_token="123456:ABC-test",
        telegram_chat_id=123456789,
        telegram_webhook_secret="",
        users_collection="users",
        poll_interval_seconds=30.0,
        log_level="DEBUG",
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fake_store():
    return FakeUserStore()


@pytest.fixture
def mock_notifier():
    notifier = AsyncMock()
    notifier.bot = None
    notifier.send_message.return_value = True
    notifier.set_webhook.return_value = True
    notifier.get_webhook_info.return_value = {
        "url": "https://relay.example.com/telegram",
        "has_custom_certificate": False,
        "pending_update_count": 0,
    }
    return notifier


@pytest.fixture
def interpreter(fake_store):
    return CommandInterpreter(fake_store, clock=lambda: FIXED_NOW)


@pytest_asyncio.fixture
async def test_app(settings, fake_store, mock_notifier, interpreter):
    """FastAPI app with state populated directly instead of via the lifespan."""
    from app.main import app

    runner = TaskRunner()
    app.state.settings = settings
    app.state.user_store = fake_store
    app.state.notifier = mock_notifier
    app.state.task_runner = runner
    app.state.webhook_handler = TelegramWebhookHandler(
        interpreter=interpreter,
        notifier=mock_notifier,
        authorized_chat_id=settings.telegram_chat_id,
        runner=runner,
    )

    yield app

    await runner.drain()


@pytest_asyncio.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
