"""Configuration dataclasses for timers and the scheduler."""
from __future__ import annotations

import dataclasses
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from tick_timer.types import (
    UNBOUNDED,
    Callback,
    Predicate,
    ProgressCallback,
    TimerConfigError,
    TimerMode,
)


@dataclass(frozen=True)
class TimerConfig:
    """Immutable description of one timer before it is scheduled.

    Mode flags may overlap; ``mode`` resolves them with the priority
    predicate > frame > duration.

    Attributes:
        duration: Total duration in time units.
        interval: Repeat interval. 0 means "same as duration".
        repeat: Restart after each completion.
        repeat_count: Completions before stopping. UNBOUNDED, or any value
            below 1, repeats forever.
        frame_count: Target number of ticks in frame mode.
        frame_mode: Count ticks instead of time.
        real_time: Accrue unscaled time, ignoring the scheduler time scale.
        predicate: Completes the timer the first tick it returns True.
        timeout: Give up waiting on the predicate after this long. 0 = never.
        on_complete: Called on each completion.
        on_update: Called every tick with progress in [0, 1].
        owner: Group handle; cancelling the owner cancels the timer.
    """

    duration: float = 0.0
    interval: float = 0.0
    repeat: bool = False
    repeat_count: int = UNBOUNDED
    frame_count: int = 0
    frame_mode: bool = False
    real_time: bool = False
    predicate: Predicate | None = None
    timeout: float = 0.0
    on_complete: Callback | None = None
    on_update: ProgressCallback | None = None
    owner: Any = None

    @property
    def mode(self) -> TimerMode:
        if self.predicate is not None:
            return TimerMode.PREDICATE
        if self.frame_mode:
            return TimerMode.FRAME
        return TimerMode.DURATION

    @property
    def effective_interval(self) -> float:
        return self.interval if self.interval > 0 else self.duration

    def clone(self) -> TimerConfig:
        """Independent copy. Callbacks and owner are shared by reference."""
        return dataclasses.replace(self)

    def validate(self) -> None:
        """Raise TimerConfigError if this config cannot be scheduled."""
        mode = self.mode
        if mode is TimerMode.PREDICATE:
            if not callable(self.predicate):
                raise TimerConfigError("predicate must be callable")
            if self.timeout < 0:
                raise TimerConfigError(
                    f"timeout must be >= 0, got {self.timeout!r}"
                )
        elif mode is TimerMode.FRAME:
            if self.frame_count < 1:
                raise TimerConfigError(
                    f"frame_count must be >= 1, got {self.frame_count!r}"
                )
        else:
            if self.duration <= 0:
                raise TimerConfigError(
                    f"duration must be positive, got {self.duration!r}"
                )
            if self.effective_interval <= 0:
                raise TimerConfigError(
                    f"interval must be positive, got {self.interval!r}"
                )

        if self.on_complete is not None and not callable(self.on_complete):
            raise TimerConfigError("on_complete must be callable")
        if self.on_update is not None and not callable(self.on_update):
            raise TimerConfigError("on_update must be callable")
        if self.owner is not None and not isinstance(self.owner, Hashable):
            raise TimerConfigError(
                f"owner must be hashable, got {type(self.owner).__name__}"
            )


@dataclass(frozen=True)
class SchedulerConfig:
    """Immutable configuration for a Scheduler.

    Attributes:
        time_scale: Multiplier applied to dt for timers not using real time.
        builder_pool_size: Released builders kept for reuse.
    """

    time_scale: float = 1.0
    builder_pool_size: int = 8

    def __post_init__(self) -> None:
        if self.time_scale < 0:
            raise ValueError("time_scale must be >= 0")
        if self.builder_pool_size < 0:
            raise ValueError("builder_pool_size must be >= 0")
