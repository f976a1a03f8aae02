"""Serial request queue.

Each upstream client owns one queue, and all of its network calls pass
through it. The queue runs at most one call at a time, in FIFO order, and
pauses for a fixed delay after each call so the upstream sees evenly spaced
requests.

State machine::

    Idle --enqueue--> Draining --queue empty--> Idle

``enqueue`` is synchronous and is the only place a drain task is started,
so everything runs on a single event loop without locks.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class QueuedRequest(Generic[T]):
    """One pending upstream call and the future its caller awaits."""

    call: Callable[[], Awaitable[T]]
    future: asyncio.Future[T]


class SerialRequestQueue:
    """FIFO queue that executes queued coroutines one at a time.

    Args:
        delay: Pause in seconds after every call, successful or not
        name: Label used in log messages
    """

    def __init__(self, delay: float = 0.0, *, name: str = "requests") -> None:
        self.delay = delay
        self.name = name
        self._pending: deque[QueuedRequest[Any]] = deque()
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def is_draining(self) -> bool:
        return self._drain_task is not None and not self._drain_task.done()

    def __len__(self) -> int:
        """Number of calls waiting to start."""
        return len(self._pending)

    def enqueue(self, call: Callable[[], Awaitable[T]]) -> asyncio.Future[T]:
        """Append a call and return the future that will carry its outcome.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()
        self._pending.append(QueuedRequest(call=call, future=future))

        if not self.is_draining:
            self._drain_task = loop.create_task(self._drain())

        return future

    async def submit(self, call: Callable[[], Awaitable[T]]) -> T:
        """Enqueue a call and wait for its result."""
        return await self.enqueue(call)

    async def _drain(self) -> None:
        while self._pending:
            request = self._pending.popleft()
            if request.future.cancelled():
                continue

            try:
                result = await request.call()
            except asyncio.CancelledError:
                request.future.cancel()
                raise
            except Exception as e:  # noqa: BLE001
                # Delivered to this caller only; the queue keeps draining
                if not request.future.done():
                    request.future.set_exception(e)
            else:
                if not request.future.done():
                    request.future.set_result(result)

            if self.delay > 0:
                await asyncio.sleep(self.delay)

    async def close(self) -> None:
        """Cancel the call in flight and every call that has not started.

        The queue stays usable: the next enqueue starts a fresh drain task.
        """
        while self._pending:
            self._pending.popleft().future.cancel()

        if self._drain_task is not None and not self._drain_task.done():
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                logger.debug("Request queue %s drain task cancelled", self.name)
        self._drain_task = None
