"""Tests for terminal module."""
import pytest

from devsim.requirement import Req
from devsim.runtime import SimulationRuntime
from devsim.terminal import SimulationContext, Terminal


def _make_view(ticks: int = 0, **company):
    rt = SimulationRuntime(seed=1)
    rt.run_ticks(ticks)
    for key, value in company.items():
        setattr(rt.state.company, key, value)
    return rt.view()


def test_time():
    assert not Terminal.time(1.0).is_met(_make_view(5))
    assert Terminal.time(1.0).is_met(_make_view(11))


def test_ticks():
    assert Terminal.ticks(3).is_met(_make_view(3))
    assert not Terminal.ticks(4).is_met(_make_view(3))


def test_field_conditions():
    view = _make_view(completed_project_count=2, cash=-10.0)
    assert Terminal.cash("<", 0).is_met(view)
    assert Terminal.completed_projects(">=", 2).is_met(view)
    assert not Terminal.completed_projects(">", 2).is_met(view)


def test_unknown_operator():
    with pytest.raises(ValueError):
        Terminal.cash("~", 0)


def test_achievement():
    view = _make_view(unlocked_achievements={"millionaire"})
    assert Terminal.achievement("millionaire").is_met(view)
    assert not Terminal.achievement("tech_leader").is_met(view)


def test_requirement():
    cond = Terminal.requirement(Req.team_size(">=", 2) & Req.cash(">", 0), "staffed")
    assert cond.is_met(_make_view())
    assert cond.describe() == "staffed"


def test_any_all():
    yes = Terminal.cash(">", 0)
    no = Terminal.cash("<", 0)
    view = _make_view()
    ctx = SimulationContext()
    assert Terminal.any(no, yes).is_met(view, ctx)
    assert not Terminal.all(no, yes).is_met(view, ctx)
    assert Terminal.all(yes, yes).is_met(view, ctx)


def test_describe():
    cond = Terminal.any(Terminal.time(60), Terminal.ticks(10))
    assert cond.describe() == "time(60) OR ticks(10)"
    assert Terminal.cash(">=", 5).describe() == 'cash(">=", 5)'
    assert Terminal.achievement("bug_free").describe() == 'achievement("bug_free")'
