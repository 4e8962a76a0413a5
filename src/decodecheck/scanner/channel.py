"""
Closable bounded channels and a selective receive over several of them.

Walkers send discoveries on channels; the orchestrator drains all of them at once
with `select()` until every channel has been closed.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised when sending on a closed channel."""


class Channel(Generic[T]):
    """
    A FIFO with a fixed buffer that senders block on when full.

    After `close()`, receivers still get every buffered item, then `(None, False)`.
    """

    def __init__(self, capacity: int = 1) -> None:
        if capacity < 1:
            raise ValueError(f"Channel capacity must be at least 1: {capacity}")
        self._capacity: int = capacity
        self._items: deque[T] = deque()
        self._closed: bool = False
        self._cond: asyncio.Condition = asyncio.Condition()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._items)

    async def send(self, item: T) -> None:
        async with self._cond:
            await self._cond.wait_for(lambda: self._closed or len(self._items) < self._capacity)
            if self._closed:
                raise ChannelClosed("send on closed channel")
            self._items.append(item)
            self._cond.notify_all()

    async def receive(self) -> tuple[T | None, bool]:
        """Return `(item, True)`, or `(None, False)` once closed and drained."""
        async with self._cond:
            await self._cond.wait_for(lambda: self._closed or bool(self._items))
            if self._items:
                item = self._items.popleft()
                self._cond.notify_all()
                return item, True
            return None, False

    async def close(self) -> None:
        async with self._cond:
            self._closed = True
            self._cond.notify_all()


async def select(*channels: Channel[Any]) -> AsyncIterator[tuple[Channel[Any], Any]]:
    """
    Yield `(channel, item)` from whichever channel delivers next.

    One receive is kept outstanding per open channel, so no channel is drained to
    exhaustion before the others. Finishes once every channel reports closed.
    """
    pending: dict[asyncio.Future[tuple[Any, bool]], Channel[Any]] = {
        asyncio.ensure_future(channel.receive()): channel for channel in channels
    }
    try:
        while pending:
            done, _ = await asyncio.wait(set(pending), return_when=asyncio.FIRST_COMPLETED)
            for future in done:
                channel = pending.pop(future)
                item, ok = future.result()
                if not ok:
                    continue
                pending[asyncio.ensure_future(channel.receive())] = channel
                yield channel, item
    finally:
        for future in pending:
            future.cancel()
