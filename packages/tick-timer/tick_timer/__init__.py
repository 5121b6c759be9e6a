"""tick-timer - Cooperative, tick-driven timers for the tick engine."""
from __future__ import annotations

from tick_timer.builder import BuilderPool, TimerBuilder
from tick_timer.config import SchedulerConfig, TimerConfig
from tick_timer.owner import LifecycleOwner, TeardownNotifier
from tick_timer.scheduler import Scheduler
from tick_timer.timer import ScheduledTimer
from tick_timer.types import (
    UNBOUNDED,
    BuilderReleasedError,
    SchedulerClosedError,
    TimerConfigError,
    TimerError,
    TimerMode,
)

__all__ = [
    "Scheduler",
    "SchedulerConfig",
    "ScheduledTimer",
    "TimerConfig",
    "TimerBuilder",
    "BuilderPool",
    "TimerMode",
    "LifecycleOwner",
    "TeardownNotifier",
    "UNBOUNDED",
    "TimerError",
    "TimerConfigError",
    "BuilderReleasedError",
    "SchedulerClosedError",
]
