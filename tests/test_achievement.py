"""Tests for achievement module."""
from devsim.achievement import AchievementDef, AchievementEngine
from devsim.config import AchievementThresholds, SimulationConfig, default_config
from devsim.entities import Developer
from devsim.events import AchievementUnlocked, EventBus, Notification
from devsim.requirement import Req
from devsim.state import SimulationState


def _setup(config: SimulationConfig | None = None):
    cfg = config or default_config()
    state = SimulationState.initial(cfg, seed=1)
    bus = EventBus()
    events = []
    bus.subscribe_all(events.append)
    return AchievementEngine(cfg), state, bus, events


def test_default_catalog():
    engine, _, _, _ = _setup()
    ids = [a.id for a in engine.catalog]
    assert ids == [
        "first_project",
        "perfect_project",
        "bug_free",
        "team_of_10",
        "millionaire",
        "tech_leader",
    ]
    assert engine.get("millionaire").name == "Millionaire"
    assert engine.get("nope") is None


def test_nothing_unlocked_at_start():
    engine, state, bus, events = _setup()
    assert engine.evaluate(state, bus) == []
    assert events == []


def test_unlock_once():
    engine, state, bus, events = _setup()
    state.company.completed_project_count = 1
    fresh = engine.evaluate(state, bus)
    assert [a.id for a in fresh] == ["first_project"]
    assert "first_project" in state.company.unlocked_achievements

    assert engine.evaluate(state, bus) == []
    unlocked = [e for e in events if isinstance(e, AchievementUnlocked)]
    assert len(unlocked) == 1
    assert unlocked[0].achievement.id == "first_project"
    assert any(
        isinstance(e, Notification) and "First Steps" in e.text for e in events
    )


def test_never_revoked():
    engine, state, bus, _ = _setup()
    state.company.cash = 1_000_000.0
    engine.evaluate(state, bus)
    state.company.cash = -5.0
    engine.evaluate(state, bus)
    assert "millionaire" in state.company.unlocked_achievements


def test_tech_leader():
    engine, state, bus, _ = _setup()
    state.company.unlocked_technologies.update({"agile", "ci_cd", "cloud"})
    engine.evaluate(state, bus)
    assert "tech_leader" not in state.company.unlocked_achievements
    state.company.unlocked_technologies.add("ai_assist")
    engine.evaluate(state, bus)
    assert "tech_leader" in state.company.unlocked_achievements


def test_thresholds_configurable():
    cfg = SimulationConfig(thresholds=AchievementThresholds(team_size=2))
    engine, state, bus, _ = _setup(cfg)
    state.developers["dev-1"] = Developer(id="dev-1")
    state.developers["dev-2"] = Developer(id="dev-2")
    engine.evaluate(state, bus)
    assert "team_of_10" in state.company.unlocked_achievements


def test_custom_catalog():
    cfg = SimulationConfig(
        achievements=[
            AchievementDef("rich", "Rich", "Hold $60k", Req.cash(">=", 60_000)),
            AchievementDef("placeholder", "Placeholder"),
        ]
    )
    engine, state, bus, _ = _setup(cfg)
    assert [a.id for a in engine.catalog] == ["rich", "placeholder"]
    state.company.cash = 60_000.0
    assert [a.id for a in engine.evaluate(state, bus)] == ["rich"]
