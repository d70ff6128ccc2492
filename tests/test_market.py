"""Tests for market module."""
import pytest

from devsim.catalog import MarketEventDef
from devsim.clock import SimTickEvent
from devsim.config import MarketConfig, SimulationConfig
from devsim.engine import TickContext
from devsim.entities import EconomyHealth
from devsim.events import EventBus, MarketShifted, Notification, Severity
from devsim.market import MarketEngine, classify
from devsim.state import SimulationState


def _setup(market: MarketConfig | None = None, seed: int = 1):
    cfg = SimulationConfig(market=market or MarketConfig())
    state = SimulationState.initial(cfg, seed=seed)
    bus = EventBus()
    events = []
    bus.subscribe_all(events.append)
    return MarketEngine(cfg), state, bus, events


def _ctx(state: SimulationState, bus: EventBus, dt: float = 0.1) -> TickContext:
    state.clock.tick_index += 1
    state.clock.sim_time += dt
    return TickContext(SimTickEvent(dt, state.clock.tick_index, state.clock.sim_time), bus)


def test_classify():
    cfg = MarketConfig()
    assert classify(0.5, cfg) is EconomyHealth.RECESSION
    assert classify(0.8, cfg) is EconomyHealth.STABLE
    assert classify(1.3, cfg) is EconomyHealth.STABLE
    assert classify(1.31, cfg) is EconomyHealth.BOOMING


def test_demand_stays_in_bounds():
    engine, state, bus, _ = _setup(
        MarketConfig(demand_shift_rate=10.0, demand_step=0.5, market_event_rate=1.0)
    )
    seen = set()
    for _ in range(100_000):
        engine.tick(state, _ctx(state, bus))
        demand = state.market.demand_multiplier
        assert 0.5 <= demand <= 2.0
        seen.add(state.market.economy_health)
        assert state.market.economy_health is classify(demand, engine.config.market)
    assert len(seen) > 1


def test_trending_shifts_to_known_type():
    engine, state, bus, _ = _setup(MarketConfig(trend_shift_rate=10.0))
    for _ in range(50):
        engine.tick(state, _ctx(state, bus))
        assert state.market.trending_category in engine.config.project_type_ids


def test_quiet_market_publishes_nothing():
    engine, state, bus, events = _setup(
        MarketConfig(demand_shift_rate=0.0, trend_shift_rate=0.0, market_event_rate=0.0)
    )
    for _ in range(100):
        engine.tick(state, _ctx(state, bus))
    assert events == []
    assert state.market.demand_multiplier == 1.0


def test_shift_publishes_copy():
    engine, state, bus, events = _setup(MarketConfig(demand_shift_rate=10.0))
    engine.tick(state, _ctx(state, bus))
    shifted = [e for e in events if isinstance(e, MarketShifted)]
    assert len(shifted) == 1
    assert shifted[0].market_state == state.market
    assert shifted[0].market_state is not state.market


class TestMarketEvents:
    def test_demand_delta_clamped(self):
        engine, state, bus, events = _setup()
        state.market.demand_multiplier = 1.95
        boom = MarketEventDef("tech_boom", "Tech boom!", 0.2)
        engine.apply_event(state, boom, _ctx(state, bus))
        assert state.market.demand_multiplier == 2.0
        notes = [e for e in events if isinstance(e, Notification)]
        assert len(notes) == 1
        assert notes[0].text == "Tech boom!"
        assert notes[0].severity is Severity.INFO

    def test_downturn_clamped(self):
        engine, state, bus, _ = _setup()
        state.market.demand_multiplier = 0.6
        engine.apply_event(
            state, MarketEventDef("downturn", "Downturn", -0.2), _ctx(state, bus)
        )
        assert state.market.demand_multiplier == 0.5

    def test_trending_override(self):
        engine, state, bus, _ = _setup()
        engine.apply_event(
            state,
            MarketEventDef("ai_revolution", "AI!", 0.1, "ai_tool"),
            _ctx(state, bus),
        )
        assert state.market.trending_category == "ai_tool"
        assert state.market.demand_multiplier == pytest.approx(1.1)
