"""Tests for projects module."""
import pytest

from devsim.clock import SimTickEvent
from devsim.config import DeveloperConfig, ProjectConfig, SimulationConfig
from devsim.engine import TickContext
from devsim.entities import Developer, Feature, Project, ProjectStatus
from devsim.events import (
    CompanyLeveledUp,
    EventBus,
    Notification,
    ProjectCompleted,
    ProjectFailed,
    Severity,
)
from devsim.factory import EntityFactory
from devsim.projects import ProjectEngine
from devsim.state import SimulationState


def _make_config(developers: DeveloperConfig | None = None, **projects) -> SimulationConfig:
    """Bug-free, no new contracts unless a test asks for them."""
    settings = {"base_bug_rate": 0.0, "project_spawn_rate": 0.0}
    settings.update(projects)
    return SimulationConfig(
        projects=ProjectConfig(**settings),
        developers=developers or DeveloperConfig(),
    )


def _setup(config: SimulationConfig | None = None, seed: int = 1):
    cfg = config or _make_config()
    state = SimulationState.initial(cfg, seed=seed)
    engine = ProjectEngine(cfg, EntityFactory(cfg))
    bus = EventBus()
    events = []
    bus.subscribe_all(events.append)
    return engine, state, bus, events


def _add_project(state: SimulationState, **overrides) -> Project:
    fields = {
        "id": "project-1",
        "type": "api",
        "name": "Data Gateway",
        "difficulty": 2,
        "requirements": {"backend": 40},
        "reward": 10_000.0,
        "reputation_reward": 10,
        "deadline": 1000.0,
        "status": ProjectStatus.ACTIVE,
    }
    fields.update(overrides)
    project = Project(**fields)
    state.active[project.id] = project
    return project


def _add_developer(
    state: SimulationState, project: Project | None = None, id: str = "dev-1", **overrides
) -> Developer:
    overrides.setdefault("skills", {"backend": 60.0})
    dev = Developer(id=id, name="Alex", **overrides)
    if project is not None:
        dev.assigned_project_id = project.id
        project.assigned_developer_ids.add(dev.id)
    state.developers[dev.id] = dev
    return dev


def _tick(engine: ProjectEngine, state: SimulationState, bus: EventBus, dt: float = 0.1):
    state.clock.tick_index += 1
    state.clock.sim_time += dt
    event = SimTickEvent(dt, state.clock.tick_index, state.clock.sim_time)
    assignments = {
        d.id: state.active[d.assigned_project_id]
        for d in state.developers.values()
        if d.assigned_project_id in state.active
    }
    engine.tick(state, TickContext(event, bus, assignments))


class TestFinalReward:
    def test_formula(self):
        engine, state, _, _ = _setup()
        project = _add_project(
            state,
            type="web_app",
            reward=1001.0,
            quality=50.0,
            bug_count=1,
            features=[
                Feature("Dashboard", implemented=True),
                Feature("Analytics", implemented=True),
                Feature("Reporting"),
                Feature("Dark Mode"),
            ],
        )
        state.market.trending_category = "web_app"
        # 1001 * 0.5 * 0.95 * 0.9 * 1.25
        assert engine.final_reward(state, project) == 534.0

        state.market.trending_category = "game"
        assert engine.final_reward(state, project) == 427.0

    def test_bug_multiplier_has_floor(self):
        engine, state, _, _ = _setup()
        state.market.trending_category = "game"
        project = _add_project(state, reward=1000.0, quality=100.0, bug_count=20)
        assert engine.final_reward(state, project) == 500.0

    def test_perfect_project_pays_full_reward(self):
        engine, state, _, _ = _setup()
        state.market.trending_category = "game"
        project = _add_project(state, quality=100.0)
        assert engine.final_reward(state, project) == 10_000.0


class TestCompletion:
    def test_side_effects(self):
        engine, state, bus, events = _setup()
        state.market.trending_category = "game"
        project = _add_project(state, progress=99.9, quality=100.0)
        dev = _add_developer(state, project)

        _tick(engine, state, bus)

        company = state.company
        assert project.status is ProjectStatus.COMPLETED
        assert project.final_reward == 10_000.0
        assert project.closed_at == pytest.approx(0.1)
        assert "project-1" not in state.active
        assert state.archive == [project]
        assert dev.assigned_project_id is None
        assert project.assigned_developer_ids == set()

        assert company.cash == 50_000.0 + 10_000.0
        assert company.total_revenue == 10_000.0
        assert company.completed_project_count == 1
        assert company.reputation == 60
        assert company.xp == 20
        assert state.stats.perfect_projects == 1
        assert state.stats.bug_free_projects == 1

        completed = [e for e in events if isinstance(e, ProjectCompleted)]
        assert len(completed) == 1
        assert completed[0].final_reward == 10_000.0
        assert completed[0].project is not project
        assert any(
            isinstance(e, Notification) and e.severity is Severity.SUCCESS for e in events
        )

    def test_completion_beats_deadline(self):
        engine, state, bus, _ = _setup()
        project = _add_project(state, progress=99.9, deadline=0.05)
        _add_developer(state, project)
        _tick(engine, state, bus)
        assert project.status is ProjectStatus.COMPLETED
        assert state.company.failed_project_count == 0

    def test_reward_below_contract_when_imperfect(self):
        engine, state, bus, _ = _setup()
        state.market.trending_category = "game"
        project = _add_project(state, progress=99.9, quality=60.0)
        _add_developer(state, project)
        _tick(engine, state, bus)
        assert 0 < project.final_reward < project.reward
        assert state.company.cash == 50_000.0 + project.final_reward


class TestFailure:
    def test_deadline_missed(self):
        engine, state, bus, events = _setup()
        project = _add_project(state, deadline=0.05)
        dev = _add_developer(state, project)

        _tick(engine, state, bus)

        assert project.status is ProjectStatus.FAILED
        assert project.final_reward is None
        assert dev.assigned_project_id is None
        assert state.archive == [project]
        assert state.company.failed_project_count == 1
        assert state.company.reputation == 40
        assert state.company.cash == 50_000.0
        assert len([e for e in events if isinstance(e, ProjectFailed)]) == 1
        assert any(
            isinstance(e, Notification) and e.severity is Severity.ERROR for e in events
        )

    def test_penalty_ratio(self):
        engine, state, bus, _ = _setup(_make_config(failure_penalty_ratio=2.0))
        _add_project(state, deadline=0.05)
        _tick(engine, state, bus)
        assert state.company.reputation == 30

    def test_reputation_clamped_at_zero(self):
        engine, state, bus, _ = _setup()
        state.company.reputation = 3
        _add_project(state, deadline=0.05)
        _tick(engine, state, bus)
        assert state.company.reputation == 0


class TestProgress:
    def test_rates(self):
        engine, state, bus, _ = _setup()
        project = _add_project(state)
        _add_developer(state, project)
        _tick(engine, state, bus)
        # skill match 1.0 * energy 1.0 * mood 0.8
        assert project.progress == pytest.approx(0.8 * 2.0 * 0.1)
        assert project.quality == pytest.approx(0.8 * 1.5 * 0.1)

    def test_partial_skill_match(self):
        engine, state, bus, _ = _setup()
        project = _add_project(state)
        _add_developer(state, project, skills={"backend": 20.0})
        _tick(engine, state, bus)
        assert project.progress == pytest.approx(0.5 * 0.8 * 2.0 * 0.1)

    def test_team_output_is_mean(self):
        engine, state, _, _ = _setup()
        project = _add_project(state)
        _add_developer(state, project, id="dev-1")
        _add_developer(state, project, id="dev-2", skills={"backend": 0.0})
        team = engine.team_output(state, project)
        assert team.contributors == 2
        assert team.productivity == pytest.approx(0.4)

    def test_exhausted_developer_contributes_nothing(self):
        engine, state, bus, _ = _setup()
        project = _add_project(state)
        _add_developer(state, project, energy=0.0)
        _tick(engine, state, bus)
        assert project.progress == 0.0
        assert engine.team_output(state, project).contributors == 0

    def test_min_working_energy(self):
        cfg = _make_config(developers=DeveloperConfig(min_working_energy=20.0))
        engine, state, _, _ = _setup(cfg)
        project = _add_project(state)
        dev = _add_developer(state, project, energy=20.0)
        assert engine.team_output(state, project).contributors == 0
        dev.energy = 21.0
        assert engine.team_output(state, project).contributors == 1

    def test_technology_bonus(self):
        engine, state, bus, _ = _setup()
        state.company.unlocked_technologies.add("agile")
        project = _add_project(state)
        _add_developer(state, project)
        _tick(engine, state, bus)
        assert project.progress == pytest.approx(0.8 * 1.2 * 2.0 * 0.1)
        assert project.quality == pytest.approx(0.8 * 1.5 * 0.1)

    def test_progress_clamped(self):
        engine, state, bus, _ = _setup()
        project = _add_project(state, quality=99.99)
        _add_developer(state, project)
        _tick(engine, state, bus, dt=10.0)
        assert project.quality == 100.0

    def test_features_follow_progress(self):
        engine, state, bus, _ = _setup()
        project = _add_project(
            state,
            progress=49.9,
            features=[Feature("A"), Feature("B"), Feature("C"), Feature("D")],
        )
        _add_developer(state, project)
        _tick(engine, state, bus)
        assert [f.implemented for f in project.features] == [True, True, False, False]
        assert project.implemented_fraction == 0.5


def test_bugs_cost_quality():
    engine, state, bus, _ = _setup(_make_config(base_bug_rate=100.0))
    project = _add_project(state, quality=50.0)
    _add_developer(state, project)
    _tick(engine, state, bus)
    assert project.bug_count == 1
    assert state.stats.total_bugs_created == 1
    assert project.quality == pytest.approx(50.0 + 0.12 - 5.0)


def test_no_bugs_without_contributors():
    engine, state, bus, _ = _setup(_make_config(base_bug_rate=100.0))
    project = _add_project(state)
    _tick(engine, state, bus)
    assert project.bug_count == 0


def test_company_level_up():
    engine, state, bus, events = _setup()
    state.company.xp = 95
    engine.grant_xp(state, 10, bus)
    assert state.company.level == 2
    assert state.company.xp == 5
    assert [e.new_level for e in events if isinstance(e, CompanyLeveledUp)] == [2]


def test_company_multi_level_up():
    engine, state, bus, _ = _setup()
    engine.grant_xp(state, 350, bus)
    # 100 for level 2, 200 for level 3
    assert state.company.level == 3
    assert state.company.xp == 50


class TestBoard:
    def test_expired_contracts_removed(self):
        engine, state, bus, _ = _setup()
        factory = EntityFactory(engine.config)
        stale = factory.generate_project(state)
        stale.deadline = 0.05
        fresh = factory.generate_project(state)
        state.available = [stale, fresh]
        _tick(engine, state, bus)
        assert state.available == [fresh]

    def test_spawn_up_to_max(self):
        engine, state, bus, _ = _setup(
            _make_config(project_spawn_rate=1000.0, max_available_projects=3)
        )
        for _ in range(5):
            _tick(engine, state, bus)
        assert len(state.available) == 3
        assert all(p.status is ProjectStatus.AVAILABLE for p in state.available)
