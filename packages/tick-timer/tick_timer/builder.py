"""TimerBuilder and BuilderPool - fluent timer configuration."""
from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from tick_timer.config import TimerConfig
from tick_timer.types import (
    UNBOUNDED,
    BuilderReleasedError,
    Callback,
    Predicate,
    ProgressCallback,
)

if TYPE_CHECKING:
    from tick_timer.scheduler import Scheduler
    from tick_timer.timer import ScheduledTimer


def _negate(predicate: Predicate) -> Predicate:
    def negated() -> bool:
        return not predicate()

    return negated


class TimerBuilder:
    """Accumulates settings into a TimerConfig through chained calls.

    Obtain one with ``Scheduler.builder()``. ``build()`` schedules the timer,
    ``build_config()`` returns the config as a reusable template. Either call
    releases the builder back to its pool; any further call raises
    BuilderReleasedError until the pool hands it out again.

    Mode-enabling setters only ever switch flags on. Overlapping modes are
    resolved when the timer is evaluated (predicate > frame > duration).

        timer = (
            scheduler.builder()
            .set_duration(3.0)
            .on_update(lambda p: bar.set(p))
            .on_complete(done)
            .use_real_time()
            .bind_to(panel)
            .build()
        )
    """

    def __init__(self, pool: BuilderPool) -> None:
        self._pool = pool
        self._config = TimerConfig()
        self._released = True

    @property
    def released(self) -> bool:
        return self._released

    def _check(self) -> None:
        if self._released:
            raise BuilderReleasedError(
                "TimerBuilder was released by build() or build_config(); "
                "acquire a new one from Scheduler.builder()"
            )

    def _set(self, **changes: Any) -> TimerBuilder:
        self._check()
        self._config = dataclasses.replace(self._config, **changes)
        return self

    # --- Timing ---

    def set_duration(self, duration: float) -> TimerBuilder:
        return self._set(duration=duration, interval=duration)

    def set_interval(self, interval: float) -> TimerBuilder:
        """Set the cycle length and enable repeat mode."""
        return self._set(interval=interval, duration=interval, repeat=True)

    def set_repeat(self, count: int = UNBOUNDED) -> TimerBuilder:
        return self._set(repeat_count=count, repeat=True)

    def set_frames(self, frames: int) -> TimerBuilder:
        """Count ticks instead of time."""
        return self._set(frame_count=frames, frame_mode=True)

    def set_frame_repeat(self, frames: int, count: int = UNBOUNDED) -> TimerBuilder:
        return self._set(
            frame_count=frames, frame_mode=True, repeat=True, repeat_count=count
        )

    def use_real_time(self, use: bool = True) -> TimerBuilder:
        return self._set(real_time=use)

    # --- Conditional waits ---

    def wait_until(self, predicate: Predicate) -> TimerBuilder:
        return self._set(predicate=predicate)

    def wait_while(self, predicate: Predicate) -> TimerBuilder:
        return self._set(predicate=_negate(predicate))

    def set_timeout(self, timeout: float) -> TimerBuilder:
        """Stop waiting, without completing, after this long. 0 = never."""
        return self._set(timeout=timeout)

    # --- Callbacks and ownership ---

    def on_complete(self, callback: Callback) -> TimerBuilder:
        return self._set(on_complete=callback)

    def on_update(self, callback: ProgressCallback) -> TimerBuilder:
        return self._set(on_update=callback)

    def bind_to(self, owner: Any) -> TimerBuilder:
        return self._set(owner=owner)

    # --- Terminal ---

    def build(self) -> ScheduledTimer:
        """Schedule the configured timer and release this builder."""
        self._check()
        config = self._config
        scheduler = self._pool.scheduler
        self._pool.release(self)
        return scheduler.schedule(config)

    def build_config(self) -> TimerConfig:
        """Return the config without scheduling, and release this builder."""
        self._check()
        config = self._config
        self._pool.release(self)
        return config


class BuilderPool:
    """Recycles TimerBuilder instances for one scheduler.

    ``acquire`` and ``release`` are an explicit pair. A builder is usable only
    between the two; releasing twice raises BuilderReleasedError.
    """

    def __init__(self, scheduler: Scheduler, capacity: int = 8) -> None:
        self.scheduler = scheduler
        self.capacity = capacity
        self._free: list[TimerBuilder] = []

    def __len__(self) -> int:
        return len(self._free)

    def acquire(self, template: TimerConfig | None = None) -> TimerBuilder:
        builder = self._free.pop() if self._free else TimerBuilder(self)
        builder._config = template.clone() if template is not None else TimerConfig()
        builder._released = False
        return builder

    def release(self, builder: TimerBuilder) -> None:
        builder._check()
        builder._released = True
        builder._config = TimerConfig()
        if len(self._free) < self.capacity:
            self._free.append(builder)
