"""Completion latch for a dynamically growing set of concurrent walks."""

from __future__ import annotations

import asyncio


class WaitGroup:
    """
    Counts outstanding units of work whose total is not known up front.

    Register work with `add()` before starting it and call `done()` when it finishes.
    `wait()` returns once the count drops to zero. Work may register more work while
    someone is waiting, so a walk must `add()` its children before calling `done()`
    for itself.
    """

    def __init__(self) -> None:
        self._count: int = 0
        self._idle: asyncio.Event = asyncio.Event()
        self._idle.set()

    @property
    def count(self) -> int:
        return self._count

    def add(self, n: int = 1) -> None:
        if self._count + n < 0:
            raise ValueError("WaitGroup counter cannot go negative")
        self._count += n
        if self._count == 0:
            self._idle.set()
        else:
            self._idle.clear()

    def done(self) -> None:
        self.add(-1)

    async def wait(self) -> None:
        while self._count > 0:
            await self._idle.wait()
