"""In-process event listeners for pipeline notifications."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

EVENTS = ("query", "data", "end")

Listener = Callable[..., Any]


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class EventEmitter:
    """
    Named listener registry.

    Listeners run in registration order and may be plain functions or
    coroutine functions. A failing listener is logged and does not stop
    delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Listener:
        """Register ``listener`` for ``event``. Returns the listener."""
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> bool:
        """Remove a listener. Returns whether it was registered."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    async def emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                await maybe_await(listener(*args))
            except Exception as e:
                logger.warning("Listener for '%s' event failed: %s", event, e)
