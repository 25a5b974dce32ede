import asyncio
from typing import Awaitable, Callable, Sequence

from visionary.utils.logger import get_logger

logger = get_logger("services.status")

SleepFunc = Callable[[float], Awaitable[None]]


class StatusRotator:
    """
    Cycles through a fixed list of status messages on a timer.

    ``start()`` shows the first message immediately and spawns the timer task;
    ``stop()`` cancels the task and clears the message. Both are idempotent.
    """

    def __init__(
        self,
        messages: Sequence[str],
        interval: float,
        sleep: SleepFunc = asyncio.sleep,
    ):
        if not messages:
            raise ValueError("StatusRotator needs at least one message")
        self.messages = tuple(messages)
        self.interval = interval
        self._sleep = sleep
        self._index: int | None = None
        self._task: asyncio.Task | None = None

    @property
    def current(self) -> str | None:
        if self._index is None:
            return None
        return self.messages[self._index]

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin rotating from the first message. Must be called from a running event loop."""
        self.stop()
        self._index = 0
        self._task = asyncio.get_running_loop().create_task(self._rotate())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._index = None

    def advance(self) -> None:
        """Move to the next message, wrapping after the last one."""
        if self._index is not None:
            self._index = (self._index + 1) % len(self.messages)

    async def _rotate(self) -> None:
        while True:
            await self._sleep(self.interval)
            self.advance()
            logger.debug("Status: %s", self.current)
