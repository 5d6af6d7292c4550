"""Transport hook: wire a chat platform to the engine through :class:`TrendCommands`."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from ..engine.service import Ranking, TrendService
from ..utils.logging import get_logger
from .messages import format_trending, help_pages

AdminCheck = Callable[[int, int], Union[bool, Awaitable[bool]]]
Sender = Callable[[int, str], Union[None, Awaitable[Any]]]

WELCOME_TEXT = "👋 Welcome!\nAdd me to your group and send /start to keep it up to date with the most used hashtags"
STARTED_TEXT = "Group set!👌 Now I will start catching all the #hashtags for you"
NOT_IN_GROUP_TEXT = "You are not in a group"
EMPTY_TEXT = "No hashtag used in this group"
RESET_TEXT = "Counter has been reset. Use /start to turn auto-reset on"
NOT_WATCHING_TEXT = "I'm not listening to this group. Use /start to start catching"


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class TrendCommands:
    """Bot command semantics on top of :class:`TrendService`.

    ``is_admin(chat_id, user_id)`` and ``send(chat_id, text)`` are supplied by
    the transport; either may be sync or async. Handlers return the reply
    text, or ``None`` when the bot stays silent.
    """

    def __init__(self, service: TrendService, is_admin: AdminCheck, send: Sender):
        self.service = service
        self.is_admin = is_admin
        self.send = send
        service.on_trending_before_reset(self._report_before_reset)

    async def start(self, chat_id: int, user_id: int, private: bool = False) -> Optional[str]:
        if private:
            return WELCOME_TEXT
        if not await self._authorized(chat_id, user_id):
            return None
        if self.service.activate(chat_id) is None:
            return None
        return STARTED_TEXT

    async def show(self, chat_id: Optional[int], user_id: int) -> Optional[str]:
        if chat_id is None:
            return NOT_IN_GROUP_TEXT
        if not await self._authorized(chat_id, user_id):
            return None
        return format_trending(self.service.top_trending(chat_id)) or EMPTY_TEXT

    async def reset(self, chat_id: Optional[int], user_id: int) -> Optional[str]:
        if chat_id is None:
            return NOT_IN_GROUP_TEXT
        if not await self._authorized(chat_id, user_id):
            return None
        if self.service.reset(chat_id):
            return RESET_TEXT
        return NOT_WATCHING_TEXT

    def message(self, chat_id: Optional[int], text: Optional[str], entities: Optional[Iterable[Any]] = None) -> None:
        if chat_id is None:
            return
        self.service.record(chat_id, text, entities)

    def help(self) -> List[str]:
        return help_pages()

    async def _authorized(self, chat_id: int, user_id: int) -> bool:
        # a private chat shares its id with the user
        if chat_id == user_id:
            return False
        try:
            return bool(await _resolve(self.is_admin(chat_id, user_id)))
        except Exception:
            get_logger(__name__).exception("Admin check failed", extra={"chat_id": chat_id, "user_id": user_id})
            return False

    async def _report_before_reset(self, chat_id: int, ranking: Ranking) -> None:
        text = format_trending(ranking)
        if text is None:
            return
        await _resolve(self.send(chat_id, text))
