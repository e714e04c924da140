"""Tests for PeriodicTask."""

import asyncio

import pytest

from inventory_resilience.infrastructure.background import PeriodicTask


async def _wait_for(predicate, timeout: float = 1.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


class TestPeriodicTask:
    @pytest.mark.asyncio
    async def test_runs_sync_callback_repeatedly(self):
        calls = []
        task = PeriodicTask("test.sync", lambda: calls.append(1), 0.01)

        task.start()
        try:
            await _wait_for(lambda: len(calls) >= 3)
        finally:
            await task.stop()

        assert not task.is_running

    @pytest.mark.asyncio
    async def test_runs_async_callback(self):
        calls = []

        async def callback():
            calls.append(1)

        task = PeriodicTask("test.async", callback, 0.01)
        task.start()
        try:
            await _wait_for(lambda: len(calls) >= 2)
        finally:
            await task.stop()

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_loop(self):
        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("sweep failed")

        task = PeriodicTask("test.flaky", flaky, 0.01)
        task.start()
        try:
            await _wait_for(lambda: len(calls) >= 3)
            assert task.is_running
        finally:
            await task.stop()

    @pytest.mark.asyncio
    async def test_run_once_isolates_errors(self):
        def broken():
            raise RuntimeError("boom")

        # Не raise
        await PeriodicTask("test.once", broken, 1.0).run_once()

    @pytest.mark.asyncio
    async def test_stop_cancels_and_start_is_idempotent(self):
        task = PeriodicTask("test.idle", lambda: None, 60.0)

        task.start()
        task.start()
        assert task.is_running

        await task.stop()
        assert not task.is_running

        # stop() без start() - no-op
        await task.stop()

    @pytest.mark.asyncio
    async def test_can_restart_after_stop(self):
        calls = []
        task = PeriodicTask("test.restart", lambda: calls.append(1), 0.01)

        task.start()
        await task.stop()
        task.start()
        try:
            await _wait_for(lambda: len(calls) >= 1)
        finally:
            await task.stop()

    def test_start_requires_running_loop(self):
        task = PeriodicTask("test.noloop", lambda: None, 1.0)

        with pytest.raises(RuntimeError):
            task.start()

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            PeriodicTask("test.bad", lambda: None, 0)


class TestPeriodicTaskStopCancellation:
    @pytest.mark.asyncio
    async def test_cancelling_stop_caller_propagates(self):
        """Test: cancel caller-а stop() не ковтається."""
        started = asyncio.Event()

        async def slow_shutdown():
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                await asyncio.sleep(0.5)
                raise

        task = PeriodicTask("test.slow", slow_shutdown, 0.01)
        task.start()
        await asyncio.wait_for(started.wait(), timeout=1.0)

        stopper = asyncio.get_running_loop().create_task(task.stop())
        await asyncio.sleep(0.01)
        stopper.cancel()

        with pytest.raises(asyncio.CancelledError):
            await stopper

        assert not task.is_running

    @pytest.mark.asyncio
    async def test_plain_stop_suppresses_loop_cancellation(self):
        task = PeriodicTask("test.plain", lambda: None, 0.01)
        task.start()

        await task.stop()

        assert not task.is_running
