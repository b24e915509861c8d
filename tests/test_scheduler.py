from __future__ import annotations

import asyncio

import pytest
from conftest import VirtualTime

from pyshiptrack.config import TrackingConfig
from pyshiptrack.exceptions import ShipTrackFetchError
from pyshiptrack.scheduler import RefreshScheduler, SchedulerState


class _Recorder:
    def __init__(self, vt: VirtualTime, *, duration: float = 0.0, fail: bool = False) -> None:
        self._vt = vt
        self.duration = duration
        self.fail = fail
        self.started: list[float] = []
        self.finished: list[float] = []
        self.ticks: list[int] = []
        self.errors: list[Exception] = []

    async def refresh(self) -> None:
        self.started.append(self._vt.now)
        if self.duration:
            await self._vt.sleep(self.duration)
        if self.fail:
            raise ShipTrackFetchError("boom", status_code=503, endpoint="/route")
        self.finished.append(self._vt.now)

    def scheduler(self, **kwargs: object) -> RefreshScheduler:
        return RefreshScheduler(
            self.refresh,
            on_tick=self.ticks.append,
            on_error=self.errors.append,
            clock=self._vt.clock,
            sleep=self._vt.sleep,
            **kwargs,  # type: ignore[arg-type]
        )


@pytest.mark.asyncio
async def test_refresh_runs_every_interval(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()
    assert scheduler.state is SchedulerState.ACTIVE

    await vt.advance(29)
    assert rec.started == []
    await vt.advance(1)
    assert len(rec.started) == 1
    await vt.advance(60)
    assert len(rec.started) == 3

    scheduler.unmount()


@pytest.mark.asyncio
async def test_ticker_publishes_seconds_since_refresh(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()

    await vt.advance(5)
    assert rec.ticks == [1, 2, 3, 4, 5]

    await vt.advance(27)  # refresh at t=30 resets the baseline
    assert rec.ticks[-1] == 2
    assert scheduler.seconds_since_refresh == 2

    scheduler.unmount()


@pytest.mark.asyncio
async def test_nothing_fires_after_unmount(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()
    await vt.advance(31)
    ticks, refreshes = len(rec.ticks), len(rec.started)

    scheduler.unmount()
    assert scheduler.state is SchedulerState.IDLE
    await vt.advance(300)

    assert len(rec.ticks) == ticks
    assert len(rec.started) == refreshes
    assert vt.pending == 0


@pytest.mark.asyncio
async def test_unmount_twice_is_harmless(vt: VirtualTime) -> None:
    scheduler = _Recorder(vt).scheduler(auto_refresh=True)
    scheduler.mount()
    scheduler.unmount()
    scheduler.unmount()
    assert not scheduler.mounted


@pytest.mark.asyncio
async def test_idle_without_auto_refresh(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    scheduler = rec.scheduler()
    scheduler.mount()
    assert scheduler.state is SchedulerState.IDLE

    await vt.advance(120)
    assert rec.started == []
    assert rec.ticks == []
    assert scheduler.seconds_since_refresh == 120

    scheduler.unmount()


@pytest.mark.asyncio
async def test_auto_refresh_only_activates_once_mounted(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    scheduler = rec.scheduler()
    scheduler.set_auto_refresh(True)
    assert scheduler.state is SchedulerState.IDLE

    scheduler.mount()
    assert scheduler.state is SchedulerState.ACTIVE
    await vt.advance(30)
    assert len(rec.started) == 1

    scheduler.unmount()


@pytest.mark.asyncio
async def test_disabling_auto_refresh_mid_flight(vt: VirtualTime) -> None:
    rec = _Recorder(vt, duration=10)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()

    await vt.advance(35)  # refresh started at t=30, still running
    assert len(rec.started) == 1
    assert scheduler.inflight == 1

    scheduler.set_auto_refresh(False)
    assert scheduler.state is SchedulerState.IDLE
    ticks = len(rec.ticks)

    await vt.advance(100)
    assert len(rec.ticks) == ticks
    assert len(rec.started) == 1
    # The in-flight refresh is allowed to land and resets the baseline.
    assert len(rec.finished) == 1
    assert scheduler.last_refresh_at == 1_040.0

    scheduler.unmount()


@pytest.mark.asyncio
async def test_re_enabling_auto_refresh_restarts_cadence(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()
    await vt.advance(10)
    scheduler.set_auto_refresh(False)
    await vt.advance(10)
    scheduler.set_auto_refresh(True)

    await vt.advance(29)
    assert rec.started == []
    await vt.advance(1)
    assert len(rec.started) == 1

    scheduler.unmount()


@pytest.mark.asyncio
async def test_failed_refresh_resets_baseline_and_keeps_ticking(vt: VirtualTime) -> None:
    rec = _Recorder(vt, fail=True)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()

    await vt.advance(30)
    assert len(rec.errors) == 1
    assert isinstance(rec.errors[0], ShipTrackFetchError)
    assert scheduler.seconds_since_refresh == 0

    await vt.advance(30)
    assert len(rec.errors) == 2

    scheduler.unmount()


@pytest.mark.asyncio
async def test_refresh_now_resets_baseline_immediately(vt: VirtualTime) -> None:
    rec = _Recorder(vt, duration=5)
    scheduler = rec.scheduler()
    scheduler.mount()
    await vt.advance(20)
    assert scheduler.seconds_since_refresh == 20

    task = asyncio.create_task(scheduler.refresh_now())
    await vt.settle()
    assert scheduler.seconds_since_refresh == 0
    assert not task.done()

    await vt.advance(5)
    assert task.done()
    assert rec.finished == [1_025.0]
    assert scheduler.last_refresh_at == 1_025.0

    scheduler.unmount()


@pytest.mark.asyncio
async def test_refresh_now_reports_errors_instead_of_raising(vt: VirtualTime) -> None:
    rec = _Recorder(vt, fail=True)
    scheduler = rec.scheduler()
    scheduler.mount()

    await scheduler.refresh_now()
    assert len(rec.errors) == 1

    scheduler.unmount()


@pytest.mark.asyncio
async def test_unmount_cancels_inflight_refresh(vt: VirtualTime) -> None:
    rec = _Recorder(vt, duration=10)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()
    await vt.advance(31)
    assert scheduler.inflight == 1

    scheduler.unmount()
    assert scheduler.inflight == 0
    await vt.advance(60)

    assert rec.finished == []
    assert rec.errors == []


@pytest.mark.asyncio
async def test_overlapping_refreshes_are_not_deduplicated(vt: VirtualTime) -> None:
    rec = _Recorder(vt, duration=45)
    scheduler = rec.scheduler(auto_refresh=True)
    scheduler.mount()

    await vt.advance(61)
    assert rec.started == [1_030.0, 1_060.0]
    assert scheduler.inflight == 2

    scheduler.unmount()


@pytest.mark.asyncio
async def test_listener_failure_does_not_stop_ticker(vt: VirtualTime) -> None:
    calls: list[int] = []

    def bad_tick(seconds: int) -> None:
        calls.append(seconds)
        raise RuntimeError("listener bug")

    scheduler = RefreshScheduler(
        _Recorder(vt).refresh,
        auto_refresh=True,
        on_tick=bad_tick,
        clock=vt.clock,
        sleep=vt.sleep,
    )
    scheduler.mount()
    await vt.advance(3)
    assert calls == [1, 2, 3]
    scheduler.unmount()


@pytest.mark.asyncio
async def test_context_manager(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    async with rec.scheduler(auto_refresh=True) as scheduler:
        assert scheduler.state is SchedulerState.ACTIVE
        await vt.advance(30)
    assert scheduler.state is SchedulerState.IDLE
    assert not scheduler.mounted
    assert len(rec.started) == 1


@pytest.mark.asyncio
async def test_from_config(vt: VirtualTime) -> None:
    rec = _Recorder(vt)
    config = TrackingConfig(refresh_interval=5, tick_interval=2.5)
    scheduler = RefreshScheduler.from_config(rec.refresh, config, auto_refresh=True, clock=vt.clock, sleep=vt.sleep)
    scheduler.mount()
    await vt.advance(10)
    assert len(rec.started) == 2
    scheduler.unmount()


def test_rejects_non_positive_intervals() -> None:
    async def noop() -> None:
        return None

    with pytest.raises(ValueError):
        RefreshScheduler(noop, refresh_interval=0)
