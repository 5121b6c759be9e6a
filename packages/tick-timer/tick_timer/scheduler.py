"""Scheduler - owns live timers and drives them once per tick."""
from __future__ import annotations

import functools
import logging
from typing import Any

from tick_timer.builder import BuilderPool, TimerBuilder, _negate
from tick_timer.config import SchedulerConfig, TimerConfig
from tick_timer.owner import TeardownNotifier
from tick_timer.timer import ScheduledTimer
from tick_timer.types import (
    UNBOUNDED,
    Callback,
    Predicate,
    ProgressCallback,
    SchedulerClosedError,
)

logger = logging.getLogger(__name__)

# Default for cancel_all(): every timer, not one owner.
_ALL = object()


class Scheduler:
    """Cooperative, tick-driven timer scheduler.

    The host calls ``update(dt)`` exactly once per tick. Timers created,
    cancelled or completed from inside a callback during that pass are
    staged in pending-add / pending-remove buffers and committed after the
    pass, so the live list is never mutated under the iteration.

    Single-threaded: every call must come from the thread running the
    host's tick loop.
    """

    def __init__(self, config: SchedulerConfig | None = None) -> None:
        self.config: SchedulerConfig = config if config is not None else SchedulerConfig()
        self._time_scale = self.config.time_scale
        self._timers: list[ScheduledTimer] = []
        self._to_add: list[ScheduledTimer] = []
        self._to_remove: list[ScheduledTimer] = []
        self._owner_timers: dict[Any, list[ScheduledTimer]] = {}
        self._updating = False
        self._closed = False
        self._builders = BuilderPool(self, self.config.builder_pool_size)

    # --- Properties ---

    @property
    def time_scale(self) -> float:
        """Multiplier applied to dt for timers that do not use real time."""
        return self._time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        if value < 0:
            raise ValueError("time_scale must be >= 0")
        self._time_scale = value

    @property
    def updating(self) -> bool:
        """True while a tick pass is in progress."""
        return self._updating

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active_count(self) -> int:
        return len(self.timers())

    def timers(self) -> list[ScheduledTimer]:
        """Running timers, including ones staged during the current pass."""
        return [t for t in self._timers + self._to_add if t.running]

    def timers_for(self, owner: Any) -> list[ScheduledTimer]:
        """Running timers bound to ``owner``."""
        return [t for t in self._owner_timers.get(owner, ()) if t.running]

    # --- Factories ---

    def delay(
        self,
        duration: float,
        on_complete: Callback,
        real_time: bool = False,
        *,
        owner: Any = None,
    ) -> ScheduledTimer:
        """Fire ``on_complete`` once after ``duration`` time units."""
        return self.schedule(
            TimerConfig(
                duration=duration,
                interval=duration,
                on_complete=on_complete,
                real_time=real_time,
                owner=owner,
            )
        )

    def repeat(
        self,
        interval: float,
        on_complete: Callback,
        repeat_count: int = UNBOUNDED,
        real_time: bool = False,
        *,
        owner: Any = None,
    ) -> ScheduledTimer:
        """Fire every ``interval``, ``repeat_count`` times or until cancelled."""
        return self.schedule(
            TimerConfig(
                duration=interval,
                interval=interval,
                repeat=True,
                repeat_count=repeat_count,
                on_complete=on_complete,
                real_time=real_time,
                owner=owner,
            )
        )

    def progress(
        self,
        duration: float,
        on_update: ProgressCallback,
        on_complete: Callback | None = None,
        real_time: bool = False,
        *,
        owner: Any = None,
    ) -> ScheduledTimer:
        """Report progress in [0, 1] every tick for ``duration``, then complete."""
        return self.schedule(
            TimerConfig(
                duration=duration,
                interval=duration,
                on_update=on_update,
                on_complete=on_complete,
                real_time=real_time,
                owner=owner,
            )
        )

    def next_tick(self, on_complete: Callback, *, owner: Any = None) -> ScheduledTimer:
        return self.delay_ticks(1, on_complete, owner=owner)

    def delay_ticks(
        self, count: int, on_complete: Callback, *, owner: Any = None
    ) -> ScheduledTimer:
        """Fire once after ``count`` ticks, regardless of dt."""
        return self.schedule(
            TimerConfig(
                frame_count=count,
                frame_mode=True,
                on_complete=on_complete,
                owner=owner,
            )
        )

    def repeat_ticks(
        self,
        count: int,
        on_complete: Callback,
        repeat_count: int = UNBOUNDED,
        *,
        owner: Any = None,
    ) -> ScheduledTimer:
        """Fire every ``count`` ticks, ``repeat_count`` times or until cancelled."""
        return self.schedule(
            TimerConfig(
                frame_count=count,
                frame_mode=True,
                repeat=True,
                repeat_count=repeat_count,
                on_complete=on_complete,
                owner=owner,
            )
        )

    def wait_until(
        self,
        predicate: Predicate,
        on_complete: Callback,
        timeout: float = 0,
        real_time: bool = False,
        *,
        owner: Any = None,
    ) -> ScheduledTimer:
        """Fire once the first tick ``predicate()`` is true.

        With ``timeout > 0`` the wait stops silently, without firing
        ``on_complete``, once that much time has accrued. A predicate that
        raises also stops the wait silently.
        """
        return self.schedule(
            TimerConfig(
                predicate=predicate,
                timeout=timeout,
                on_complete=on_complete,
                real_time=real_time,
                owner=owner,
            )
        )

    def wait_while(
        self,
        predicate: Predicate,
        on_complete: Callback,
        timeout: float = 0,
        real_time: bool = False,
        *,
        owner: Any = None,
    ) -> ScheduledTimer:
        """Fire once the first tick ``predicate()`` is false."""
        return self.wait_until(
            _negate(predicate), on_complete, timeout, real_time, owner=owner
        )

    def builder(self, template: TimerConfig | None = None) -> TimerBuilder:
        """Acquire a fluent builder, optionally seeded from a saved config."""
        return self._builders.acquire(template)

    # --- Creation ---

    def schedule(self, config: TimerConfig) -> ScheduledTimer:
        """Validate ``config`` and start a timer for it.

        Raises SchedulerClosedError after ``close()`` and TimerConfigError
        for an invalid config.
        """
        if self._closed:
            raise SchedulerClosedError("Cannot schedule timers on a closed Scheduler")
        config.validate()

        timer = ScheduledTimer(self, config)
        if self._updating:
            self._to_add.append(timer)
        else:
            self._timers.append(timer)
        logger.debug("Scheduled %r", timer)

        if config.owner is not None:
            self._bind(timer, config.owner)
        return timer

    def _bind(self, timer: ScheduledTimer, owner: Any) -> None:
        timers = self._owner_timers.get(owner)
        if timers is not None:
            timers.append(timer)
            return
        self._owner_timers[owner] = [timer]
        if isinstance(owner, TeardownNotifier):
            owner.add_teardown_listener(functools.partial(self._on_owner_teardown, owner))

    def _on_owner_teardown(self, owner: Any) -> None:
        logger.debug("Owner %r torn down, cancelling its timers", owner)
        self.cancel_all(owner)

    # --- Removal ---

    def _remove(self, timer: ScheduledTimer) -> None:
        """Unregister a timer. Deferred while a tick pass is in progress."""
        if self._updating:
            self._to_remove.append(timer)
            return
        if timer in self._timers:
            self._timers.remove(timer)
        self._forget(timer)

    def _forget(self, timer: ScheduledTimer) -> None:
        owner = timer.config.owner
        if owner is None:
            return
        timers = self._owner_timers.get(owner)
        if timers is None or timer not in timers:
            return
        timers.remove(timer)
        if not timers:
            del self._owner_timers[owner]

    # --- Group control ---

    def cancel_all(self, owner: Any = _ALL) -> None:
        """Cancel every timer, or only those bound to ``owner``.

        Cancelling everything also forgets all owners. Cancelling an owner
        drops its entry; binding a new timer to it later starts a new group.
        ``cancel_all(None)`` is a no-op, since None never owns timers.
        """
        if owner is None:
            return
        if owner is not _ALL:
            timers = self._owner_timers.pop(owner, None)
            if timers is None:
                return
            for timer in list(timers):
                timer.cancel()
            return

        live = self._timers + self._to_add
        for timer in live:
            timer._halt()
        self._to_add.clear()
        self._owner_timers.clear()
        if self._updating:
            # The pass in progress still indexes the live list.
            self._to_remove.extend(self._timers)
        else:
            self._timers.clear()
            self._to_remove.clear()
        logger.debug("Cancelled all timers (%d)", len(live))

    def pause_all(self) -> None:
        for timer in self._timers + self._to_add:
            timer.pause()

    def resume_all(self) -> None:
        for timer in self._timers + self._to_add:
            timer.resume()

    def close(self) -> None:
        """Cancel everything and refuse new timers from now on."""
        if self._closed:
            return
        self.cancel_all()
        self._closed = True
        logger.debug("Scheduler closed")

    # --- Tick driver ---

    def update(self, dt: float) -> None:
        """Advance every live timer by one tick of ``dt`` time units.

        Timers are visited newest first. Stopped timers are dropped in place,
        paused ones are skipped. Exceptions from completion or progress
        callbacks propagate after the pending buffers are committed.
        """
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt!r}")
        if self._updating:
            raise RuntimeError("Scheduler.update() is not re-entrant")

        scaled_dt = dt * self._time_scale
        self._updating = True
        try:
            timers = self._timers
            for i in range(len(timers) - 1, -1, -1):
                timer = timers[i]
                if timer.running and not timer.paused:
                    timer._advance(scaled_dt, dt)
                if not timer.running:
                    del timers[i]
                    self._forget(timer)
        finally:
            self._updating = False
            self._commit()

    def _commit(self) -> None:
        self._timers.extend(self._to_add)
        for timer in self._to_remove:
            if timer in self._timers:
                self._timers.remove(timer)
            self._forget(timer)
        self._to_add.clear()
        self._to_remove.clear()
