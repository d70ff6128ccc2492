"""Tests for requirement and view modules."""
import dataclasses

import pytest

from devsim.config import default_config
from devsim.entities import Developer
from devsim.requirement import Req
from devsim.state import SimulationState
from devsim.view import StateView


def _make_view(**company) -> StateView:
    """A StateView over a studio with known values."""
    cfg = default_config()
    state = SimulationState.initial(cfg, seed=1)
    state.company.cash = 12_000.0
    state.company.completed_project_count = 3
    state.company.total_revenue = 40_000.0
    state.company.unlocked_technologies.add("agile")
    state.company.unlocked_achievements.add("first_project")
    state.stats.bug_free_projects = 2
    state.developers["dev-1"] = Developer(id="dev-1", level=4)
    state.developers["dev-2"] = Developer(id="dev-2", level=2)
    state.clock.sim_time = 120.0
    for key, value in company.items():
        setattr(state.company, key, value)
    return StateView.of(state, cfg)


def test_field_requirements():
    view = _make_view()
    assert Req.cash(">=", 12_000).evaluate(view)
    assert not Req.cash(">", 12_000).evaluate(view)
    assert Req.completed_projects("==", 3).evaluate(view)
    assert Req.bug_free_projects(">=", 2).evaluate(view)
    assert Req.team_size("==", 2).evaluate(view)
    assert Req.total_revenue(">", 30_000).evaluate(view)
    assert Req.reputation("==", 50).evaluate(view)
    assert Req.company_level("==", 1).evaluate(view)
    assert Req.time(">=", 120).evaluate(view)
    assert Req.field("max_developer_level", "==", 4).evaluate(view)


def test_unknown_operator_rejected_at_construction():
    with pytest.raises(ValueError, match="Unknown operator"):
        Req.cash("=>", 1)


def test_technology_and_achievement():
    view = _make_view()
    assert Req.technology("agile").evaluate(view)
    assert not Req.technology("cloud").evaluate(view)
    assert Req.achievement("first_project").evaluate(view)
    assert not Req.achievement("millionaire").evaluate(view)


def test_all_technologies():
    assert not Req.all_technologies().evaluate(_make_view())
    everything = {"agile", "ci_cd", "cloud", "ai_assist"}
    assert Req.all_technologies().evaluate(_make_view(unlocked_technologies=everything))


def test_combinators():
    view = _make_view()
    yes = Req.cash(">", 0)
    no = Req.cash("<", 0)
    assert (yes & yes).evaluate(view)
    assert not (yes & no).evaluate(view)
    assert (yes | no).evaluate(view)
    assert not (no | no).evaluate(view)
    assert Req.all(yes, yes, yes).evaluate(view)
    assert Req.any(no, no, yes).evaluate(view)


def test_custom():
    view = _make_view()
    assert Req.custom(lambda v: v.cash / v.team_size == 6_000).evaluate(view)


class TestStateView:
    def test_frozen(self):
        view = _make_view()
        with pytest.raises(dataclasses.FrozenInstanceError):
            view.cash = 1.0

    def test_shares_no_mutable_state(self):
        cfg = default_config()
        state = SimulationState.initial(cfg, seed=1)
        view = StateView.of(state, cfg)
        state.company.unlocked_technologies.add("agile")
        state.company.cash = 0.0
        assert "agile" not in view.technologies
        assert view.cash == 50_000.0
        assert isinstance(view.technologies, frozenset)

    def test_empty_team(self):
        cfg = default_config()
        view = StateView.of(SimulationState.initial(cfg), cfg)
        assert view.team_size == 0
        assert view.max_developer_level == 0
