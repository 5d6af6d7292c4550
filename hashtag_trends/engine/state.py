from __future__ import annotations

import threading
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..models import TrendSnapshot
from ..utils.logging import get_logger
from .ranker import rank_counts
from .scheduler import BeforeResetCallback, ResetScheduler

Interval = Union[int, float, timedelta]


def interval_seconds(interval: Interval) -> float:
    seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
    if seconds < 0:
        raise ValueError("reset interval must not be negative")
    return seconds


class ChatTrendState:
    """Hashtag counters of a single chat plus its auto-reset schedule.

    Every access to ``_counts`` and ``_cancel_requested`` holds ``_lock`` so
    the recording path and the scheduler never see a half-cleared map.
    """

    def __init__(self, chat_id: int, max_tags: Optional[int] = None):
        self.chat_id = chat_id
        self.max_tags = max_tags
        self._lock = threading.Lock()
        self._counts: Optional[Dict[str, int]] = None
        self._cancel_requested = False
        self._scheduler: Optional[ResetScheduler] = None

    def record(self, tags: Iterable[str]) -> None:
        tags = list(tags)
        if not tags:
            return
        dropped = 0
        with self._lock:
            if self._counts is None:
                self._counts = {}
            counts = self._counts
            for tag in tags:
                tag = tag.lower()
                if tag not in counts and self.max_tags is not None and len(counts) >= self.max_tags:
                    dropped += 1
                    continue
                counts[tag] = counts.get(tag, 0) + 1
        if dropped:
            get_logger(__name__).debug("Tag vocabulary full", extra={"chat_id": self.chat_id, "dropped": dropped})

    def rank(self, k: int) -> List[Tuple[str, int]]:
        with self._lock:
            return rank_counts(self._counts, k)

    def snapshot(self) -> TrendSnapshot:
        with self._lock:
            return TrendSnapshot(chat_id=self.chat_id, counts=dict(self._counts or {}))

    def clear(self) -> None:
        with self._lock:
            self._counts = None

    @property
    def auto_reset_active(self) -> bool:
        with self._lock:
            cancelled = self._cancel_requested
        return self._scheduler is not None and self._scheduler.running and not cancelled

    def activate_auto_reset(self, interval: Interval, on_before_reset: BeforeResetCallback) -> None:
        """Start the periodic reset, or change the period of the running one.

        A zero interval turns auto-reset off without touching the counters.
        Starting a new task needs a running event loop.
        """

        seconds = interval_seconds(interval)
        if seconds == 0:
            self._request_stop()
            return
        scheduler = self._scheduler
        with self._lock:
            self._cancel_requested = False
        if scheduler is not None and scheduler.running:
            scheduler.rearm(seconds, on_before_reset)
            return
        self._scheduler = ResetScheduler(self, seconds, on_before_reset)
        self._scheduler.start()

    def deactivate_auto_reset(self) -> None:
        """Stop the periodic reset after its current wait and clear the counters."""

        with self._lock:
            self._counts = None
        self._request_stop()

    def _request_stop(self) -> None:
        scheduler = self._scheduler
        if scheduler is None or not scheduler.running:
            return
        with self._lock:
            self._cancel_requested = True
        scheduler.wake()

    def take_reset_snapshot(self) -> Optional[TrendSnapshot]:
        """Snapshot and clear in one step, or ``None`` when a stop is pending."""

        with self._lock:
            if self._cancel_requested:
                self._cancel_requested = False
                return None
            snapshot = TrendSnapshot(chat_id=self.chat_id, counts=dict(self._counts or {}))
            self._counts = None
        return snapshot

    def consume_stop_request(self) -> bool:
        with self._lock:
            requested = self._cancel_requested
            self._cancel_requested = False
        return requested

    async def aclose(self) -> None:
        with self._lock:
            self._cancel_requested = False
        if self._scheduler is not None:
            await self._scheduler.stop()
