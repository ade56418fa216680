"""Tests for Debouncer."""

import asyncio

import pytest

from hidesync.core.sync import Debouncer


class Counter:
    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self.delay = delay

    async def __call__(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.calls += 1


class TestDebouncerInit:
    """Tests for Debouncer construction."""

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError, match="delay must be >= 0"):
            Debouncer(-1, Counter())

    def test_idle_initially(self) -> None:
        debouncer = Debouncer(0.01, Counter())
        assert debouncer.pending is False
        assert debouncer.running is False


class TestDebouncerSchedule:
    """Tests for schedule() and firing."""

    @pytest.mark.asyncio
    async def test_fires_after_delay(self) -> None:
        callback = Counter()
        debouncer = Debouncer(0.01, callback)

        debouncer.schedule()
        assert debouncer.pending is True
        await asyncio.sleep(0.05)

        assert callback.calls == 1
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_burst_coalesces(self) -> None:
        """Test that rapid schedules produce a single call."""
        callback = Counter()
        debouncer = Debouncer(0.02, callback)

        for _ in range(5):
            debouncer.schedule()
            await asyncio.sleep(0.005)
        await asyncio.sleep(0.06)

        assert callback.calls == 1

    @pytest.mark.asyncio
    async def test_failing_callback_is_logged(self, caplog) -> None:
        async def boom() -> None:
            raise RuntimeError("boom")

        debouncer = Debouncer(0.0, boom, name="push")
        debouncer.schedule()
        await asyncio.sleep(0.02)

        assert "Debounced push failed" in caplog.text
        assert debouncer.running is False


class TestDebouncerCancel:
    """Tests for cancel()."""

    @pytest.mark.asyncio
    async def test_cancelled_timer_never_fires(self) -> None:
        callback = Counter()
        debouncer = Debouncer(0.01, callback)

        debouncer.schedule()
        assert debouncer.cancel() is True
        await asyncio.sleep(0.05)

        assert callback.calls == 0
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_cancel_when_idle(self) -> None:
        assert Debouncer(0.01, Counter()).cancel() is False

    @pytest.mark.asyncio
    async def test_cancel_after_sleep_elapsed(self) -> None:
        """Test that a timer whose sleep already finished still won't fire once cancelled."""
        callback = Counter()
        debouncer = Debouncer(0.0, callback)

        debouncer.schedule()
        # Let the timer task start sleeping
        await asyncio.sleep(0)
        debouncer.cancel()
        await asyncio.sleep(0.02)

        assert callback.calls == 0

    @pytest.mark.asyncio
    async def test_cancel_does_not_interrupt_running_callback(self) -> None:
        callback = Counter(delay=0.03)
        debouncer = Debouncer(0.0, callback)

        debouncer.schedule()
        await asyncio.sleep(0.01)
        assert debouncer.running is True

        assert debouncer.cancel() is False
        await debouncer.wait_idle()
        assert callback.calls == 1


class TestDebouncerFlush:
    """Tests for flush()."""

    @pytest.mark.asyncio
    async def test_flush_runs_pending_now(self) -> None:
        callback = Counter()
        debouncer = Debouncer(10.0, callback)

        debouncer.schedule()
        assert await debouncer.flush() is True

        assert callback.calls == 1
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_flush_without_pending(self) -> None:
        callback = Counter()
        assert await Debouncer(10.0, callback).flush() is False
        assert callback.calls == 0
