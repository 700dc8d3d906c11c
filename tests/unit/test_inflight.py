"""Tests for in-flight request coalescing."""

import asyncio

import pytest

from src.infrastructure.cache.inflight import InFlightRegistry


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_task():
    registry = InFlightRegistry()
    calls = 0
    release = asyncio.Event()

    async def producer():
        nonlocal calls
        calls += 1
        await release.wait()
        return "done"

    first, started_first = registry.get_or_start("k", producer)
    second, started_second = registry.get_or_start("k", producer)

    assert first is second
    assert started_first is True
    assert started_second is False
    assert registry.is_running("k")

    release.set()
    assert await first == "done"
    assert calls == 1


@pytest.mark.asyncio
async def test_entry_removed_after_success():
    registry = InFlightRegistry()

    async def producer():
        return 1

    task, _ = registry.get_or_start("k", producer)
    await task
    await asyncio.sleep(0)
    assert not registry.is_running("k")
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_entry_removed_after_failure():
    registry = InFlightRegistry()

    async def producer():
        raise RuntimeError("boom")

    task, _ = registry.get_or_start("k", producer)
    with pytest.raises(RuntimeError):
        await task
    await asyncio.sleep(0)
    assert not registry.is_running("k")


@pytest.mark.asyncio
async def test_entry_removed_after_cancellation():
    registry = InFlightRegistry()

    async def producer():
        await asyncio.sleep(10)

    task, _ = registry.get_or_start("k", producer)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(0)
    assert not registry.is_running("k")


@pytest.mark.asyncio
async def test_new_task_started_after_settle():
    registry = InFlightRegistry()

    async def producer():
        return "value"

    first, _ = registry.get_or_start("k", producer)
    await first
    await asyncio.sleep(0)
    second, started = registry.get_or_start("k", producer)
    await second
    assert started is True
    assert first is not second
    assert registry.get_stats() == {"in_flight": 0, "started": 2, "joined": 0}


@pytest.mark.asyncio
async def test_shielded_waiter_cancellation_keeps_task_running():
    registry = InFlightRegistry()
    release = asyncio.Event()

    async def producer():
        await release.wait()
        return "finished"

    task, _ = registry.get_or_start("k", producer)
    waiter = asyncio.ensure_future(asyncio.shield(task))
    await asyncio.sleep(0)
    waiter.cancel()
    await asyncio.sleep(0)

    assert not task.cancelled()
    release.set()
    assert await task == "finished"
