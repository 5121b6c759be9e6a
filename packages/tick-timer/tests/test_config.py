"""Tests for tick_timer.config - TimerConfig and SchedulerConfig."""
from __future__ import annotations

import dataclasses

import pytest

from tick_timer import UNBOUNDED, SchedulerConfig, TimerConfig, TimerConfigError, TimerMode


def _noop() -> None:
    pass


class TestMode:
    def test_default_is_duration(self) -> None:
        assert TimerConfig(duration=1.0).mode is TimerMode.DURATION

    def test_frame_flag(self) -> None:
        assert TimerConfig(frame_count=3, frame_mode=True).mode is TimerMode.FRAME

    def test_predicate_beats_frame(self) -> None:
        cfg = TimerConfig(frame_count=3, frame_mode=True, predicate=lambda: True)
        assert cfg.mode is TimerMode.PREDICATE

    def test_frame_beats_duration(self) -> None:
        cfg = TimerConfig(duration=2.0, frame_count=3, frame_mode=True)
        assert cfg.mode is TimerMode.FRAME


class TestEffectiveInterval:
    def test_defaults_to_duration(self) -> None:
        assert TimerConfig(duration=2.5).effective_interval == 2.5

    def test_explicit_interval(self) -> None:
        assert TimerConfig(duration=2.5, interval=0.5).effective_interval == 0.5


class TestImmutability:
    def test_fields_are_frozen(self) -> None:
        cfg = TimerConfig(duration=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.duration = 2.0  # type: ignore[misc]

    def test_clone_is_independent_but_shares_callbacks(self) -> None:
        cfg = TimerConfig(duration=1.0, on_complete=_noop)
        copy = cfg.clone()
        assert copy == cfg
        assert copy is not cfg
        assert copy.on_complete is _noop


class TestValidate:
    def test_valid_duration(self) -> None:
        TimerConfig(duration=1.0).validate()

    @pytest.mark.parametrize("duration", [0.0, -1.0])
    def test_non_positive_duration(self, duration: float) -> None:
        with pytest.raises(TimerConfigError, match="duration must be positive"):
            TimerConfig(duration=duration).validate()

    def test_negative_interval_falls_back_to_duration(self) -> None:
        TimerConfig(duration=1.0, interval=-3.0).validate()

    @pytest.mark.parametrize("frames", [0, -5])
    def test_frame_count_below_one(self, frames: int) -> None:
        with pytest.raises(TimerConfigError, match="frame_count"):
            TimerConfig(frame_count=frames, frame_mode=True).validate()

    def test_frame_mode_ignores_duration(self) -> None:
        TimerConfig(frame_count=1, frame_mode=True).validate()

    def test_predicate_must_be_callable(self) -> None:
        with pytest.raises(TimerConfigError, match="predicate"):
            TimerConfig(predicate=True).validate()  # type: ignore[arg-type]

    def test_negative_timeout(self) -> None:
        with pytest.raises(TimerConfigError, match="timeout"):
            TimerConfig(predicate=lambda: False, timeout=-1.0).validate()

    def test_predicate_mode_needs_no_duration(self) -> None:
        TimerConfig(predicate=lambda: False).validate()

    @pytest.mark.parametrize("count", [0, -2])
    def test_non_positive_repeat_count_is_accepted(self, count: int) -> None:
        TimerConfig(duration=1.0, repeat=True, repeat_count=count).validate()

    def test_unbounded_repeat_count(self) -> None:
        TimerConfig(duration=1.0, repeat=True, repeat_count=UNBOUNDED).validate()

    def test_callbacks_must_be_callable(self) -> None:
        with pytest.raises(TimerConfigError, match="on_complete"):
            TimerConfig(duration=1.0, on_complete="done").validate()  # type: ignore[arg-type]
        with pytest.raises(TimerConfigError, match="on_update"):
            TimerConfig(duration=1.0, on_update=42).validate()  # type: ignore[arg-type]

    def test_owner_must_be_hashable(self) -> None:
        with pytest.raises(TimerConfigError, match="hashable"):
            TimerConfig(duration=1.0, owner=[]).validate()

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            TimerConfig().validate()


class TestSchedulerConfig:
    def test_defaults(self) -> None:
        cfg = SchedulerConfig()
        assert cfg.time_scale == 1.0
        assert cfg.builder_pool_size == 8

    def test_negative_time_scale(self) -> None:
        with pytest.raises(ValueError, match="time_scale"):
            SchedulerConfig(time_scale=-0.5)

    def test_negative_pool_size(self) -> None:
        with pytest.raises(ValueError, match="builder_pool_size"):
            SchedulerConfig(builder_pool_size=-1)

    def test_zero_time_scale_allowed(self) -> None:
        assert SchedulerConfig(time_scale=0.0).time_scale == 0.0
