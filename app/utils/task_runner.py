import asyncio
import logging
from collections.abc import Coroutine

logger = logging.getLogger(__name__)


class TaskRunner:
    """Fire-and-forget submission of coroutines onto the running loop.

    Holds a strong reference to every task until it finishes so the event
    loop cannot garbage-collect it mid-flight. Nothing awaits a submitted
    task except ``drain()``.
    """

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    def submit(self, coro: Coroutine, name: str | None = None) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self):
        """Wait for every outstanding task, including ones submitted meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed", task.get_name(), exc_info=exc,
            )
