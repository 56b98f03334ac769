"""Tests for in-flight request draining."""

import asyncio
import contextlib

import pytest

from src.catalog.core.shutdown import RequestTracker

pytestmark = pytest.mark.unit


async def _hold(tracker: RequestTracker, seconds: float) -> None:
    async with tracker.track_request():
        await asyncio.sleep(seconds)


async def test_counts_requests() -> None:
    tracker = RequestTracker()

    async with tracker.track_request():
        assert tracker.in_flight_count == 1

    assert tracker.in_flight_count == 0
    assert not tracker.is_shutting_down


async def test_drains_immediately_when_idle() -> None:
    tracker = RequestTracker()

    await tracker.start_shutdown()

    assert tracker.is_shutting_down
    assert await tracker.wait_for_drain(timeout=1.0) is True


async def test_waits_for_in_flight_requests() -> None:
    tracker = RequestTracker()
    tasks = [asyncio.create_task(_hold(tracker, delay)) for delay in (0.1, 0.2, 0.15)]
    await asyncio.sleep(0.05)
    assert tracker.in_flight_count == 3

    await tracker.start_shutdown()

    assert await tracker.wait_for_drain(timeout=1.0) is True
    assert tracker.in_flight_count == 0
    await asyncio.gather(*tasks)


async def test_grace_period_elapses() -> None:
    tracker = RequestTracker()
    task = asyncio.create_task(_hold(tracker, 5.0))
    await asyncio.sleep(0.05)

    await tracker.start_shutdown()

    assert await tracker.wait_for_drain(timeout=0.1) is False
    assert tracker.in_flight_count == 1

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    assert tracker.in_flight_count == 0


async def test_reset() -> None:
    tracker = RequestTracker()
    await tracker.start_shutdown()

    tracker.reset()

    assert not tracker.is_shutting_down
    assert tracker.in_flight_count == 0
