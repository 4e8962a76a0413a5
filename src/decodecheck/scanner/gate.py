"""Counting gate that bounds the number of concurrently open file descriptors."""

from __future__ import annotations

import asyncio
from types import TracebackType


class ResourceGate:
    """
    Fixed-capacity admission gate shared by every directory listing and file read.

    Both kinds of work compete for the same tokens, so a wide tree cannot starve
    decoding of descriptors or vice versa. Use as `async with gate: ...` so the token
    is returned on every exit path.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"Gate capacity must be at least 1: {capacity}")
        self._capacity: int = capacity
        self._semaphore: asyncio.Semaphore = asyncio.Semaphore(capacity)
        self._in_flight: int = 0
        self._peak: int = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def in_flight(self) -> int:
        """Number of tokens currently held."""
        return self._in_flight

    @property
    def peak(self) -> int:
        """Highest number of tokens ever held at once."""
        return self._peak

    async def acquire(self) -> None:
        await self._semaphore.acquire()
        self._in_flight += 1
        self._peak = max(self._peak, self._in_flight)

    def release(self) -> None:
        self._in_flight -= 1
        self._semaphore.release()

    async def __aenter__(self) -> ResourceGate:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
