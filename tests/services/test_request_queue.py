"""Tests for the serial request queue."""

from __future__ import annotations

import asyncio

import pytest

from anirec.services.request_queue import SerialRequestQueue


class TestSerialRequestQueue:
    @pytest.mark.asyncio
    async def test_calls_run_in_fifo_order(self) -> None:
        queue = SerialRequestQueue()
        order: list[int] = []

        async def call(index: int) -> int:
            order.append(index)
            await asyncio.sleep(0)
            return index

        results = await asyncio.gather(*(queue.submit(lambda i=i: call(i)) for i in range(5)))

        assert results == [0, 1, 2, 3, 4]
        assert order == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_at_most_one_call_in_flight(self) -> None:
        queue = SerialRequestQueue()
        in_flight = 0
        peak = 0

        async def call() -> None:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.001)
            in_flight -= 1

        await asyncio.gather(*(queue.submit(call) for _ in range(6)))

        assert peak == 1

    @pytest.mark.asyncio
    async def test_failure_reaches_only_its_caller(self) -> None:
        queue = SerialRequestQueue()

        async def ok() -> str:
            return "ok"

        async def boom() -> str:
            raise ValueError("boom")

        first = queue.enqueue(ok)
        second = queue.enqueue(boom)
        third = queue.enqueue(ok)

        assert await first == "ok"
        with pytest.raises(ValueError, match="boom"):
            await second
        assert await third == "ok"

    @pytest.mark.asyncio
    async def test_single_drain_task(self) -> None:
        queue = SerialRequestQueue()
        release = asyncio.Event()

        async def blocked() -> None:
            await release.wait()

        first = queue.enqueue(blocked)
        await asyncio.sleep(0)
        drain_task = queue._drain_task

        second = queue.enqueue(blocked)

        assert queue.is_draining
        assert queue._drain_task is drain_task
        assert len(queue) == 1

        release.set()
        await asyncio.gather(first, second)
        await asyncio.sleep(0)
        assert not queue.is_draining

    @pytest.mark.asyncio
    async def test_delay_after_each_call(self, mocker) -> None:
        queue = SerialRequestQueue(delay=0.25)
        sleep = mocker.patch(
            "anirec.services.request_queue.asyncio.sleep",
            new=mocker.AsyncMock(),
        )

        async def call() -> int:
            return 1

        await queue.submit(call)
        await queue.submit(call)
        # Let the drain task finish its trailing pause
        await asyncio.gather(queue._drain_task)

        sleep.assert_awaited_with(0.25)
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_restarts_after_going_idle(self) -> None:
        queue = SerialRequestQueue()

        async def call() -> str:
            return "done"

        assert await queue.submit(call) == "done"
        await asyncio.sleep(0)
        assert not queue.is_draining

        assert await queue.submit(call) == "done"

    @pytest.mark.asyncio
    async def test_close_cancels_pending_calls(self) -> None:
        queue = SerialRequestQueue()
        release = asyncio.Event()

        async def blocked() -> None:
            await release.wait()

        running = queue.enqueue(blocked)
        waiting = queue.enqueue(blocked)
        await asyncio.sleep(0)

        await queue.close()

        assert running.cancelled()
        assert waiting.cancelled()
        assert not queue.is_draining

    @pytest.mark.asyncio
    async def test_cancelled_caller_is_skipped(self) -> None:
        queue = SerialRequestQueue()
        calls: list[str] = []

        async def record(name: str) -> str:
            calls.append(name)
            return name

        first = queue.enqueue(lambda: record("first"))
        skipped = queue.enqueue(lambda: record("skipped"))
        skipped.cancel()
        last = queue.enqueue(lambda: record("last"))

        assert await first == "first"
        assert await last == "last"
        assert calls == ["first", "last"]
