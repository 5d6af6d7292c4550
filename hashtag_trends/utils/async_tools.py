from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Set

from .logging import get_logger

# Strong references so detached tasks are not garbage collected mid-flight.
_BACKGROUND_TASKS: Set[asyncio.Task] = set()


def dispatch_detached(callback: Callable[..., Any], *args: Any) -> None:
    """Run ``callback(*args)`` on the running loop without awaiting it.

    Coroutine functions become background tasks, plain callables are queued
    with ``call_soon``. Failures are logged and never reach the caller.
    """

    loop = asyncio.get_running_loop()
    if inspect.iscoroutinefunction(callback):
        _spawn(callback(*args), callback)
    else:
        loop.call_soon(_call_guarded, callback, *args)


def _call_guarded(callback: Callable[..., Any], *args: Any) -> None:
    try:
        result = callback(*args)
    except Exception:
        get_logger(__name__).exception("Detached callback failed", extra={"callback": _name(callback)})
        return
    if inspect.isawaitable(result):
        # e.g. functools.partial wrapping an async def
        _spawn(result, callback)


def _spawn(awaitable: Awaitable[Any], callback: Callable[..., Any]) -> None:
    task = asyncio.ensure_future(_guarded(awaitable, callback))
    _BACKGROUND_TASKS.add(task)
    task.add_done_callback(_BACKGROUND_TASKS.discard)


async def _guarded(awaitable: Awaitable[Any], callback: Callable[..., Any]) -> None:
    try:
        await awaitable
    except asyncio.CancelledError:
        raise
    except Exception:
        get_logger(__name__).exception("Detached callback failed", extra={"callback": _name(callback)})


def _name(callback: Callable[..., Any]) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
