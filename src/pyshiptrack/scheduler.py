"""Polling cadence, staleness ticker and cancellation for one tracked view.

State machine per view::

    IDLE --mount() with auto_refresh / set_auto_refresh(True)--> ACTIVE
    ACTIVE --unmount() / set_auto_refresh(False)--> IDLE

While ``ACTIVE`` two asyncio tasks run independently:

* the staleness ticker (every ``tick_interval`` seconds) publishes the
  number of seconds since the last refresh; it never touches the network.
* the refresh tick (every ``refresh_interval`` seconds) starts the refresh
  callback in its own task. When that task finishes, successfully or not,
  the staleness baseline is reset.

Overlapping refreshes are not deduplicated: a slow refresh and the next
tick may run concurrently, and whichever finishes last wins.

Both periodic tasks and every in-flight refresh are cancelled
synchronously on :meth:`RefreshScheduler.unmount`. Callbacks are guarded
by generation counters so nothing fires after teardown, even if a task
was already scheduled to resume on the current loop iteration.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pyshiptrack._constants import DEFAULT_REFRESH_INTERVAL, DEFAULT_TICK_INTERVAL
from pyshiptrack.config import TrackingConfig

_logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[Any]]
SleepFunc = Callable[[float], Awaitable[Any]]


class SchedulerState(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"


class RefreshScheduler:
    """Drive periodic refreshes and a staleness indicator for one view.

    Usage::

        scheduler = RefreshScheduler(view_refresh, auto_refresh=True)
        async with scheduler:
            ...  # refreshes every 30 s until the block exits

    Parameters
    ----------
    on_refresh
        Coroutine function that re-fetches the snapshot. Exceptions it
        raises are forwarded to *on_error* and never stop the scheduler.
    refresh_interval, tick_interval
        Periods in seconds of the refresh tick and the staleness ticker.
    auto_refresh
        Whether periodic refresh is enabled once mounted.
    on_tick
        Called with the whole seconds since the last refresh on every
        staleness tick.
    on_error
        Error channel for failed refreshes.
    clock, sleep
        Monotonic clock and sleep coroutine; injectable for virtual time.
    """

    def __init__(
        self,
        on_refresh: RefreshCallback,
        *,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        auto_refresh: bool = False,
        on_tick: Callable[[int], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if refresh_interval <= 0 or tick_interval <= 0:
            raise ValueError("refresh_interval and tick_interval must be positive")
        self._on_refresh = on_refresh
        self._refresh_interval = refresh_interval
        self._tick_interval = tick_interval
        self._auto_refresh = auto_refresh
        self._on_tick = on_tick
        self._on_error = on_error
        self._clock = clock
        self._sleep = sleep

        self._mounted = False
        # Bumped on every deactivation; periodic loops exit when it moves.
        self._activation = 0
        # Bumped on every unmount; refresh completions from an older
        # lifecycle are ignored.
        self._lifecycle = 0
        self._ticker_task: asyncio.Task[None] | None = None
        self._refresh_task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._last_refresh = clock()

    @classmethod
    def from_config(cls, on_refresh: RefreshCallback, config: TrackingConfig, **kwargs: Any) -> RefreshScheduler:
        return cls(
            on_refresh,
            refresh_interval=config.refresh_interval,
            tick_interval=config.tick_interval,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RefreshScheduler:
        self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.ACTIVE if self._ticker_task is not None else SchedulerState.IDLE

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def inflight(self) -> int:
        """Number of refreshes currently running."""
        return len(self._inflight)

    @property
    def last_refresh_at(self) -> float:
        """Clock value of the last staleness reset."""
        return self._last_refresh

    @property
    def seconds_since_refresh(self) -> int:
        return max(0, math.floor(self._clock() - self._last_refresh))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Bind the scheduler to a view; activates if auto-refresh is on."""
        if self._mounted:
            return
        self._mounted = True
        self._reset_baseline()
        if self._auto_refresh:
            self._activate()

    def unmount(self) -> None:
        """Tear down: cancel both periodic tasks and every in-flight refresh."""
        if not self._mounted:
            return
        self._mounted = False
        self._lifecycle += 1
        self._deactivate()
        for task in list(self._inflight):
            task.cancel()
        self._inflight.clear()

    async def aclose(self) -> None:
        """Unmount and wait for the cancelled tasks to finish unwinding."""
        tasks = [t for t in (self._ticker_task, self._refresh_task, *self._inflight) if t is not None]
        self.unmount()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def set_auto_refresh(self, enabled: bool) -> None:
        """Enable or disable periodic refresh without remounting."""
        if enabled == self._auto_refresh:
            return
        self._auto_refresh = enabled
        if not self._mounted:
            return
        if enabled:
            self._activate()
        else:
            self._deactivate()

    async def refresh_now(self) -> None:
        """Manual refresh: reset the staleness baseline now, then refresh.

        Failures go to the error channel like periodic ones. Returns once
        the refresh has finished or been cancelled by teardown.
        """
        self._reset_baseline()
        task = self._spawn_refresh("manual")
        await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset_baseline(self) -> None:
        self._last_refresh = self._clock()

    def _activate(self) -> None:
        if self._ticker_task is not None:
            return
        generation = self._activation
        loop = asyncio.get_running_loop()
        self._ticker_task = loop.create_task(self._ticker_loop(generation), name="shiptrack-staleness-ticker")
        self._refresh_task = loop.create_task(self._refresh_loop(generation), name="shiptrack-refresh-tick")
        _logger.debug(
            "Refresh scheduler active (refresh=%.1fs tick=%.1fs)",
            self._refresh_interval,
            self._tick_interval,
        )

    def _deactivate(self) -> None:
        self._activation += 1
        was_active = self._ticker_task is not None
        for task in (self._ticker_task, self._refresh_task):
            if task is not None and not task.done():
                task.cancel()
        self._ticker_task = None
        self._refresh_task = None
        if was_active:
            _logger.debug("Refresh scheduler idle")

    async def _ticker_loop(self, generation: int) -> None:
        while True:
            await self._sleep(self._tick_interval)
            if generation != self._activation:
                return
            self._publish_tick()

    async def _refresh_loop(self, generation: int) -> None:
        while True:
            await self._sleep(self._refresh_interval)
            if generation != self._activation:
                return
            self._spawn_refresh("periodic")

    def _publish_tick(self) -> None:
        if self._on_tick is None:
            return
        try:
            self._on_tick(self.seconds_since_refresh)
        except Exception:
            _logger.debug("Staleness tick listener failed", exc_info=True)

    def _spawn_refresh(self, trigger: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(self._run_refresh(self._lifecycle, trigger))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_refresh(self, lifecycle: int, trigger: str) -> None:
        try:
            await self._on_refresh()
        except Exception as exc:
            _logger.debug("%s refresh failed", trigger.capitalize(), exc_info=True)
            if lifecycle == self._lifecycle:
                self._report_error(exc)
        finally:
            # A failed refresh still resets the ticker; errors are shown
            # through the error channel instead.
            if lifecycle == self._lifecycle:
                self._reset_baseline()

    def _report_error(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            _logger.debug("Refresh error listener failed", exc_info=True)
