from __future__ import annotations

import threading
from typing import Dict, Iterator, Optional

from ..utils.logging import get_logger
from .state import ChatTrendState


class TrendRegistry:
    """Process-wide mapping of chat id to its :class:`ChatTrendState`.

    Lookups of known chats are lock-free dict reads; only creating an entry
    takes the registry lock. ``max_chats`` refuses chats beyond the limit and
    ``max_tags_per_chat`` is handed to every new state.
    """

    def __init__(self, max_chats: Optional[int] = None, max_tags_per_chat: Optional[int] = None):
        self.max_chats = max_chats
        self.max_tags_per_chat = max_tags_per_chat
        self._states: Dict[int, ChatTrendState] = {}
        self._lock = threading.Lock()

    def lookup(self, chat_id: int) -> Optional[ChatTrendState]:
        return self._states.get(chat_id)

    def get_or_create(self, chat_id: int) -> Optional[ChatTrendState]:
        state = self._states.get(chat_id)
        if state is not None:
            return state
        with self._lock:
            state = self._states.get(chat_id)
            if state is not None:
                return state
            if self.max_chats is not None and len(self._states) >= self.max_chats:
                get_logger(__name__).warning(
                    "Chat limit reached; not tracking chat", extra={"chat_id": chat_id, "max_chats": self.max_chats}
                )
                return None
            state = ChatTrendState(chat_id, max_tags=self.max_tags_per_chat)
            self._states[chat_id] = state
        get_logger(__name__).info("Tracking chat", extra={"chat_id": chat_id})
        return state

    def discard(self, chat_id: int) -> None:
        with self._lock:
            self._states.pop(chat_id, None)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._states))

    async def aclose(self) -> None:
        with self._lock:
            states = list(self._states.values())
            self._states.clear()
        for state in states:
            await state.aclose()
