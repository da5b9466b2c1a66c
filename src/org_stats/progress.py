"""Progress events flowing from the analysis to whoever presents them."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

from .models import ProgressEvent

STAGES = ("fetching", "cloning", "analyzing", "complete", "error")


class ProgressChannel:
    """Unbounded queue of :class:`ProgressEvent`.

    Producers call :meth:`emit`, which never blocks. A consumer drains the
    channel with ``async for`` until :meth:`close` is called.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ProgressEvent | None] = asyncio.Queue()
        self._closed = False

    def emit(
        self,
        stage: str,
        message: str,
        progress: float,
        repository: str | None = None,
    ) -> None:
        if stage not in STAGES:
            raise ValueError(f"Unknown progress stage: {stage!r}")
        if self._closed:
            return
        progress = min(max(progress, 0.0), 100.0)
        self._queue.put_nowait(ProgressEvent(stage, message, progress, repository))

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    def drain_nowait(self) -> list[ProgressEvent]:
        """Return every event queued so far without waiting."""
        events = []
        while not self._queue.empty():
            event = self._queue.get_nowait()
            if event is not None:
                events.append(event)
        return events

    def __aiter__(self) -> AsyncIterator[ProgressEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ProgressEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event
