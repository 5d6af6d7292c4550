from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple, Union

from ..models import Settings, TrendSnapshot
from ..utils.logging import get_logger
from ..utils.text import HashtagExtractor
from .registry import TrendRegistry
from .state import ChatTrendState, Interval

Ranking = List[Tuple[str, int]]
TrendingCallback = Callable[[int, Ranking], Union[None, Awaitable[Any]]]


class TrendService:
    """Entry point for command handlers: activate, record, show and reset chats."""

    def __init__(self, settings: Optional[Settings] = None, registry: Optional[TrendRegistry] = None):
        self.settings = settings or Settings()
        self.registry = registry or TrendRegistry(
            max_chats=self.settings.max_chats,
            max_tags_per_chat=self.settings.max_tags_per_chat,
        )
        self.extractor = HashtagExtractor(self.settings.marker)
        self._on_before_reset: Optional[TrendingCallback] = None

    def on_trending_before_reset(self, callback: TrendingCallback) -> TrendingCallback:
        """Register the callback that receives each chat's leaderboard before an auto-reset.

        Returns the callback so it can be used as a decorator.
        """

        self._on_before_reset = callback
        return callback

    def activate(self, chat_id: int, interval: Optional[Interval] = None) -> Optional[ChatTrendState]:
        created = chat_id not in self.registry
        state = self.registry.get_or_create(chat_id)
        if state is None:
            return None
        if interval is None:
            interval = self.settings.reset_interval
        try:
            state.activate_auto_reset(interval, self._before_reset_handler(chat_id))
        except (RuntimeError, ValueError):
            # no running loop or a bad interval: leave no half-activated chat behind
            if created:
                self.registry.discard(chat_id)
            raise
        get_logger(__name__).info("Chat activated", extra={"chat_id": chat_id, "auto_reset": state.auto_reset_active})
        return state

    def record(self, chat_id: int, text: Optional[str], entities: Optional[Iterable[Any]] = None) -> List[str]:
        """Count the hashtags of one message; unwatched chats are ignored."""

        state = self.registry.lookup(chat_id)
        if state is None:
            return []
        tags = self.extractor.extract(text, entities)
        state.record(tags)
        return tags

    def top_trending(self, chat_id: int, k: Optional[int] = None) -> Ranking:
        state = self.registry.lookup(chat_id)
        if state is None:
            return []
        return state.rank(self.settings.top_k if k is None else k)

    def reset(self, chat_id: int) -> bool:
        state = self.registry.lookup(chat_id)
        if state is None:
            return False
        state.deactivate_auto_reset()
        get_logger(__name__).info("Chat reset", extra={"chat_id": chat_id})
        return True

    async def aclose(self) -> None:
        await self.registry.aclose()

    def _before_reset_handler(self, chat_id: int) -> Callable[[TrendSnapshot], Awaitable[None]]:
        async def notify(snapshot: TrendSnapshot) -> None:
            callback = self._on_before_reset
            if callback is None:
                return
            result = callback(chat_id, snapshot.rank(self.settings.top_k))
            if inspect.isawaitable(result):
                await result

        return notify
