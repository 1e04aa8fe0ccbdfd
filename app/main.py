import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from app.config import Settings
from app.services.command_interpreter import CommandInterpreter
from app.services.telegram_notifier import TelegramNotifier
from app.services.user_poller import NewUserPoller
from app.services.user_store import StoreUnavailable, UserStore
from app.services.webhook_handler import TelegramWebhookHandler
from app.utils.task_runner import TaskRunner

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings)

    # Firestore: missing credentials only disable store commands
    user_store = UserStore(settings)
    try:
        await user_store.connect()
    except StoreUnavailable as e:
        logger.warning("Firestore unavailable (%s), store commands disabled", e)

    notifier = TelegramNotifier(settings)
    runner = TaskRunner()
    interpreter = CommandInterpreter(user_store)

    app.state.settings = settings
    app.state.user_store = user_store
    app.state.notifier = notifier
    app.state.task_runner = runner
    app.state.webhook_handler = TelegramWebhookHandler(
        interpreter=interpreter,
        notifier=notifier,
        authorized_chat_id=settings.telegram_chat_id,
        runner=runner,
    )

    # New-user poller (background task)
    poller = NewUserPoller(
        store=user_store,
        notifier=notifier,
        poll_interval=settings.poll_interval_seconds,
    )
    app.state.poller = poller
    poller_task = asyncio.create_task(poller.run_forever())

    logger.info(
        "Signup relay started (port %s, store connected=%s)",
        settings.port,
        user_store.available,
    )
    yield

    # Shutdown
    poller_task.cancel()
    try:
        await poller_task
    except asyncio.CancelledError:
        pass

    await runner.drain()
    await user_store.close()
    logger.info("Signup relay shut down")


app = FastAPI(title="Signup Relay", version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


from app.api.router import api_router  # noqa: E402

app.include_router(api_router)


def run():
    settings = Settings()
    configure_logging(settings)
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
