"""ScheduledTimer - runtime state machine for one scheduled timer."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tick_timer.config import TimerConfig
from tick_timer.types import TimerMode

if TYPE_CHECKING:
    from tick_timer.scheduler import Scheduler

logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class ScheduledTimer:
    """A live timer owned by a Scheduler.

    Created by the scheduler, never instantiated directly. The handle is for
    querying status and issuing control commands; all counters are advanced
    by the scheduler's tick pass.

    ``paused`` is orthogonal to ``running``: a paused timer is still running
    for lifecycle purposes but accrues no time or frames.
    """

    def __init__(self, scheduler: Scheduler, config: TimerConfig) -> None:
        self._scheduler = scheduler
        self._config = config
        self._mode = config.mode
        self._interval = config.effective_interval
        # Predicate waits measure against their timeout.
        self._duration = (
            config.timeout if self._mode is TimerMode.PREDICATE else config.duration
        )
        self._elapsed = 0.0
        self._frames = 0
        self._repeats = 0
        self._running = True
        self._paused = False

    def __repr__(self) -> str:
        state = "running" if self._running else "stopped"
        if self._running and self._paused:
            state = "paused"
        return (
            f"ScheduledTimer(mode={self._mode.value}, state={state}, "
            f"progress={self.progress:.3f}, repeats={self._repeats})"
        )

    # --- Queries ---

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def running(self) -> bool:
        """False once cancelled, completed, exhausted, or timed out."""
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def frames(self) -> int:
        """Ticks counted in the current frame-mode cycle."""
        return self._frames

    @property
    def repeats(self) -> int:
        """Completed cycles of a repeating timer."""
        return self._repeats

    @property
    def remaining(self) -> float:
        return max(0.0, self._duration - self._elapsed)

    @property
    def progress(self) -> float:
        """Current cycle progress in [0, 1]."""
        if self._mode is TimerMode.FRAME:
            return _clamp01(self._frames / self._config.frame_count)
        if self._mode is TimerMode.PREDICATE:
            if self._duration <= 0:
                return 0.0
            return _clamp01(self._elapsed / self._duration)
        return _clamp01(self._elapsed / self._interval)

    # --- Control ---

    def pause(self) -> ScheduledTimer:
        self._paused = True
        return self

    def resume(self) -> ScheduledTimer:
        self._paused = False
        return self

    def reset(self) -> ScheduledTimer:
        """Restart from zero in the running, unpaused state.

        Only local state changes. A timer the scheduler has already dropped
        is not re-registered and will not be ticked again.
        """
        self._elapsed = 0.0
        self._frames = 0
        self._repeats = 0
        self._running = True
        self._paused = False
        return self

    def cancel(self) -> None:
        """Stop without firing callbacks and unregister from the scheduler."""
        self._running = False
        self._scheduler._remove(self)

    def complete(self) -> None:
        """Finish now: progress(1.0), then completion, then cancel.

        No-op if the timer is not running.
        """
        if not self._running:
            return
        if self._config.on_update is not None:
            self._config.on_update(1.0)
        if self._config.on_complete is not None:
            self._config.on_complete()
        self.cancel()

    # --- Internal (called by the scheduler) ---

    def _halt(self) -> None:
        self._running = False

    def _advance(self, scaled_dt: float, real_dt: float) -> None:
        """Run one evaluation step. Caller has checked running and paused."""
        dt = real_dt if self._config.real_time else scaled_dt
        if self._mode is TimerMode.PREDICATE:
            self._advance_predicate(dt)
        elif self._mode is TimerMode.FRAME:
            self._frames += 1
            if self._notify_progress():
                self._finish_cycle(self._frames >= self._config.frame_count)
        else:
            self._elapsed += dt
            if self._notify_progress():
                self._finish_cycle(self._elapsed >= self._interval)

    def _notify_progress(self) -> bool:
        """Fire on_update. Returns False if the callback stopped this timer."""
        if self._config.on_update is not None:
            self._config.on_update(self.progress)
        return self._running

    def _finish_cycle(self, reached: bool) -> None:
        if not reached:
            return
        if self._config.on_complete is not None:
            self._config.on_complete()
        if not self._config.repeat:
            self._running = False
            return
        self._elapsed = 0.0
        self._frames = 0
        self._repeats += 1
        limit = self._config.repeat_count
        if limit > 0 and self._repeats >= limit:
            self._running = False

    def _advance_predicate(self, dt: float) -> None:
        timeout = self._config.timeout
        if timeout > 0:
            self._elapsed += dt
            if self._elapsed >= timeout:
                logger.debug("Wait timed out after %.3f: %r", self._elapsed, self)
                self._running = False
                return

        predicate = self._config.predicate
        assert predicate is not None
        try:
            satisfied = predicate()
        except Exception:
            logger.debug("Wait predicate raised, stopping %r", self, exc_info=True)
            self._running = False
            return

        if satisfied and self._running:
            if self._config.on_complete is not None:
                self._config.on_complete()
            self._running = False
