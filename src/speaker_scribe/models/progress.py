"""Event channel carrying model-loading progress to a subscriber."""

from __future__ import annotations

import asyncio
from typing import Any

from speaker_scribe.utils import get_logger

logger = get_logger(__name__)

_CLOSED = object()


class ProgressChannel:
    """Async stream of progress events, publishable from worker threads.

    Loaders run in threads and call ``publish``; the host iterates the
    channel with ``async for`` until the producer calls ``close``. Events
    published after ``close`` are dropped. A channel passed to an
    acquisition that finds every model cached receives nothing but the
    close marker.

    Must be created while an event loop is running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, event: dict[str, Any]) -> None:
        if self._closed:
            logger.debug(f"Dropping progress event after close: {event}")
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._loop.call_soon_threadsafe(self._queue.put_nowait, _CLOSED)

    def __aiter__(self) -> ProgressChannel:
        return self

    async def __anext__(self) -> dict[str, Any]:
        event = await self._queue.get()
        if event is _CLOSED:
            raise StopAsyncIteration
        return event
