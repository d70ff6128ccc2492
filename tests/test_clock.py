"""Tests for clock module."""
import pytest

from devsim.config import ClockConfig, default_config
from devsim.clock import SimulationClock
from devsim.errors import InvalidConfiguration
from devsim.state import SimulationState


def _make_clock() -> SimulationClock:
    cfg = default_config()
    return SimulationClock(cfg.clock, SimulationState.initial(cfg))


def test_delta_follows_speed():
    clock = _make_clock()
    event = clock.tick(100.0)
    assert event.simulated_delta_seconds == pytest.approx(0.1)
    clock.set_speed(5)
    event = clock.tick(100.0)
    assert event.simulated_delta_seconds == pytest.approx(0.5)
    assert event.tick_index == 2
    assert event.sim_time == pytest.approx(0.6)


def test_counters_live_on_state():
    cfg = default_config()
    state = SimulationState.initial(cfg)
    clock = SimulationClock(cfg.clock, state)
    clock.tick(1000.0)
    assert state.clock.tick_index == 1
    assert state.clock.sim_time == pytest.approx(1.0)


def test_invalid_speed_leaves_clock_unchanged():
    clock = _make_clock()
    clock.set_speed(2)
    with pytest.raises(InvalidConfiguration, match="not allowed"):
        clock.set_speed(3)
    assert clock.speed == 2


def test_custom_speed_set():
    cfg = default_config()
    clock = SimulationClock(
        ClockConfig(speed_multipliers=(0.5, 1), default_speed=1),
        SimulationState.initial(cfg),
    )
    clock.set_speed(0.5)
    assert clock.tick(1000.0).simulated_delta_seconds == pytest.approx(0.5)


def test_negative_delta_rejected():
    clock = _make_clock()
    with pytest.raises(InvalidConfiguration):
        clock.tick(-1.0)
    assert clock.tick_index == 0


def test_pause_resume():
    clock = _make_clock()
    assert not clock.paused
    clock.pause()
    assert clock.paused
    clock.resume()
    assert not clock.paused
