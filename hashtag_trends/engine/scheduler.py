from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

from ..utils.async_tools import dispatch_detached
from ..utils.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from ..models import TrendSnapshot
    from .state import ChatTrendState

BeforeResetCallback = Callable[["TrendSnapshot"], Union[None, Awaitable[Any]]]


class ResetScheduler:
    """Recurring task that clears one chat's counters every ``interval`` seconds.

    The task waits for the next tick or a wake-up. A wake-up either rearms
    the timer with the current period or, when the state asked to stop,
    ends the task. On a tick the state takes a snapshot and clears itself
    under its lock, then ``on_before_reset`` gets the snapshot detached.
    """

    def __init__(self, state: "ChatTrendState", interval: float, on_before_reset: BeforeResetCallback):
        self._state = state
        self.interval = interval
        self.on_before_reset = on_before_reset
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._wakeup: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        if self._task is None or self._task.done():
            return False
        return self._loop is not None and not self._loop.is_closed()

    def start(self) -> None:
        if self.running:
            raise RuntimeError("reset scheduler already running")
        self._loop = asyncio.get_running_loop()
        self._wakeup = asyncio.Event()
        self._task = self._loop.create_task(self._run(self._wakeup), name=f"trend-reset-{self._state.chat_id}")

    def rearm(self, interval: float, on_before_reset: BeforeResetCallback) -> None:
        self.interval = interval
        self.on_before_reset = on_before_reset
        self.wake()

    def wake(self) -> None:
        """Interrupt the current wait; safe to call from any thread."""

        loop, event = self._loop, self._wakeup
        if loop is None or event is None or loop.is_closed():
            return
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is loop:
            event.set()
        else:
            loop.call_soon_threadsafe(event.set)

    async def stop(self) -> None:
        task = self._task
        if task is None or task.done() or not self.running:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self, wakeup: asyncio.Event) -> None:
        logger = get_logger(__name__)
        logger.info("Auto-reset armed", extra={"chat_id": self._state.chat_id, "interval_s": self.interval})
        while True:
            try:
                await asyncio.wait_for(wakeup.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                snapshot = self._state.take_reset_snapshot()
                if snapshot is None:
                    break
                logger.info(
                    "Auto-reset fired",
                    extra={"chat_id": self._state.chat_id, "tags": len(snapshot.counts), "mentions": snapshot.total},
                )
                dispatch_detached(self.on_before_reset, snapshot)
                continue
            wakeup.clear()
            if self._state.consume_stop_request():
                break
        logger.info("Auto-reset stopped", extra={"chat_id": self._state.chat_id})
