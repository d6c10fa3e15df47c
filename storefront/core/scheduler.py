# storefront/core/scheduler.py
import asyncio
from typing import Callable, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class AsyncioScheduler:
    """
    Schedules callbacks on the running event loop.

    Must be called from inside a coroutine (the flows call it from their
    async submit handlers). The returned asyncio.TimerHandle is cancellable.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)
