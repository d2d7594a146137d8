"""Tests for src.adapters.asyncio_timer — repeating callbacks on the event loop."""

from __future__ import annotations

import asyncio

import pytest

from src.adapters.asyncio_timer import AsyncioTimer
from src.core.refresh_scheduler import RefreshScheduler, SchedulerState
from src.data.models import Friend


class TestAsyncioTimer:
    @pytest.mark.asyncio
    async def test_fires_repeatedly(self):
        calls: list[int] = []
        handle = AsyncioTimer().call_repeating(0.01, lambda: calls.append(1))
        await asyncio.sleep(0.1)
        handle.cancel()
        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_no_calls_after_cancel(self):
        calls: list[int] = []
        handle = AsyncioTimer().call_repeating(0.01, lambda: calls.append(1))
        await asyncio.sleep(0.05)
        handle.cancel()
        seen = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == seen
        assert handle.cancelled is True

    @pytest.mark.asyncio
    async def test_cancel_before_first_tick(self):
        calls: list[int] = []
        handle = AsyncioTimer().call_repeating(0.01, lambda: calls.append(1))
        handle.cancel()
        handle.cancel()
        await asyncio.sleep(0.05)
        assert calls == []

    @pytest.mark.asyncio
    async def test_failing_callback_keeps_ticking(self):
        calls: list[int] = []

        def boom() -> None:
            calls.append(1)
            raise RuntimeError("boom")

        handle = AsyncioTimer().call_repeating(0.01, boom)
        await asyncio.sleep(0.1)
        handle.cancel()
        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_explicit_loop(self):
        loop = asyncio.get_running_loop()
        calls: list[int] = []
        handle = AsyncioTimer(loop).call_repeating(0.01, lambda: calls.append(1))
        await asyncio.sleep(0.05)
        handle.cancel()
        assert calls


class TestSchedulerOnEventLoop:
    @pytest.mark.asyncio
    async def test_snapshots_published_until_stop(self, fixed_compute):
        published = []
        scheduler = RefreshScheduler(
            AsyncioTimer(), compute=fixed_compute, interval_ms=10,
            on_snapshot=published.append,
        )
        scheduler.start([Friend(name="Me", location="Here", tz="Europe/Berlin")])
        await asyncio.sleep(0.1)
        scheduler.stop()
        count = len(published)
        await asyncio.sleep(0.05)

        assert count >= 3
        assert len(published) == count
        assert scheduler.state is SchedulerState.IDLE
