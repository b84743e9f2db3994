"""Run asynchronous steps strictly one after another."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")


async def run_in_order(
    items: Iterable[T],
    step: Callable[[T], Awaitable[Any]],
) -> bool:
    """
    Await ``step(item)`` for each item, in order, one at a time.

    A step stops the sequence by returning False; any other return value
    (including None) moves on to the next item.

    Args:
        items: Items to visit
        step: Coroutine function called with each item

    Returns:
        True if every item was visited, False if a step stopped early
    """
    for item in items:
        if await step(item) is False:
            return False
    return True
