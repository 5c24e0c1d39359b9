"""Bounded channel for delivering streamed text to a consumer."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

_CLOSED = object()


class StreamChannel:
    """Single-producer queue with backpressure.

    ``send`` waits while the buffer is full. ``close`` is idempotent and ends
    ``async for`` iteration once buffered items are drained.
    """

    def __init__(self, maxsize: int = 64) -> None:
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, text: str) -> None:
        if self._closed:
            raise RuntimeError("send on closed StreamChannel")
        await self._queue.put(text)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    async def receive(self) -> str | None:
        """Next item, or None once the channel is closed and drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            # keep the sentinel for other waiting readers
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iter()

    async def _iter(self) -> AsyncIterator[str]:
        while True:
            item = await self.receive()
            if item is None:
                return
            yield item
