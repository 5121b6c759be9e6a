"""Shared types, constants, and errors for tick-timer."""
from __future__ import annotations

from enum import Enum
from typing import Callable

# Repeat-count sentinel: repeat until cancelled.
UNBOUNDED = -1

Callback = Callable[[], None]
ProgressCallback = Callable[[float], None]
Predicate = Callable[[], bool]


class TimerMode(Enum):
    """How a timer measures its progress. Listed in evaluation priority."""

    PREDICATE = "predicate"
    FRAME = "frame"
    DURATION = "duration"


class TimerError(Exception):
    """Base class for tick-timer errors."""


class TimerConfigError(TimerError, ValueError):
    """Raised when a timer is built or scheduled with an invalid configuration."""


class BuilderReleasedError(TimerError, RuntimeError):
    """Raised when a builder is used after build() or build_config()."""


class SchedulerClosedError(TimerError, RuntimeError):
    """Raised when scheduling on a scheduler that has been closed."""
