from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from devsim.errors import DevSimError

if TYPE_CHECKING:
    from devsim.entities import Developer
    from devsim.runtime import SimulationRuntime

logger = logging.getLogger(__name__)


class Strategy(ABC):
    """Base class for automated players used by headless simulations."""

    @abstractmethod
    def decide(self, runtime: SimulationRuntime) -> list[str]:
        """Take zero or more player actions. Returns a label per action taken."""
        ...

    @abstractmethod
    def describe(self) -> str: ...


class Idle(Strategy):
    """Never acts. Useful to watch the economy drain a studio."""

    def decide(self, runtime: SimulationRuntime) -> list[str]:
        return []

    def describe(self) -> str:
        return "Idle"


class GreedyContractor(Strategy):
    """Accept the best-paying contract whenever a rested developer is free.

    Developers below *rest_below* energy are pulled off their project and
    sent back once they recover to *resume_above*. Surplus cash above
    *cash_reserve* goes to research (cheapest first), then hiring, then
    office upgrades once the office is full.
    """

    def __init__(
        self,
        cash_reserve: float = 10_000.0,
        research: bool = True,
        hire: bool = True,
        upgrade_office: bool = True,
        rest_below: float = 25.0,
        resume_above: float = 90.0,
    ) -> None:
        self.cash_reserve = cash_reserve
        self.rest_below = rest_below
        self.resume_above = resume_above
        self.research = research
        self.hire = hire
        self.upgrade_office = upgrade_office

    def decide(self, runtime: SimulationRuntime) -> list[str]:
        taken: list[str] = []
        state = runtime.state
        company = state.company
        accept_cost = runtime.config.projects.accept_cost

        taken.extend(self._rotate(runtime))

        while state.available and company.cash >= accept_cost:
            rested = self._rested(runtime)
            if not rested:
                break
            best = max(state.available, key=lambda p: (p.reward, p.id))
            dev = max(rested, key=lambda d: d.skill_match(best.requirements))
            runtime.accept_project(best.id, [dev.id])
            taken.append(f"accept:{best.id}")

        if self.research:
            candidates = sorted(
                (
                    t for t in runtime.config.technologies
                    if t.id not in company.unlocked_technologies
                    and company.level >= t.level
                ),
                key=lambda t: (t.cost, t.id),
            )
            for tech in candidates:
                if company.cash - tech.cost < self.cash_reserve:
                    break
                runtime.research_technology(tech.id)
                taken.append(f"research:{tech.id}")

        if self.hire and len(state.developers) < company.max_developers:
            cost = runtime.hire_cost()
            if company.cash - cost >= self.cash_reserve:
                dev = runtime.hire_developer()
                taken.append(f"hire:{dev.id}")

        if self.upgrade_office and len(state.developers) >= company.max_developers:
            office = runtime.config.get_office(company.office_level + 1)
            if office is not None and company.cash - office.cost >= self.cash_reserve:
                runtime.upgrade_office()
                taken.append(f"office:{office.level}")

        return taken

    def _rested(self, runtime: SimulationRuntime) -> list[Developer]:
        return [d for d in runtime.state.free_developers() if d.energy >= self.resume_above]

    def _rotate(self, runtime: SimulationRuntime) -> list[str]:
        taken: list[str] = []
        state = runtime.state
        for _, dev in sorted(state.developers.items()):
            if dev.assigned_project_id is not None and dev.energy < self.rest_below:
                runtime.unassign_developer(dev.id)
                taken.append(f"rest:{dev.id}")

        for project in state.iter_active():
            if project.assigned_developer_ids:
                continue
            rested = self._rested(runtime)
            if not rested:
                break
            dev = max(rested, key=lambda d: d.skill_match(project.requirements))
            runtime.assign_developer(dev.id, project.id)
            taken.append(f"assign:{dev.id}")
        return taken

    def describe(self) -> str:
        return f"GreedyContractor(reserve={self.cash_reserve:,.0f})"


class ScriptedActions(Strategy):
    """Replay a fixed list of (sim_time, action, kwargs) entries.

    Each entry fires once, on the first decision at or after its time.
    Rejected actions are logged and recorded as "rejected:<action>".
    """

    def __init__(self, script: list[tuple[float, str, dict[str, Any]]]) -> None:
        self.script = sorted(script, key=lambda entry: entry[0])
        self._cursor = 0

    def decide(self, runtime: SimulationRuntime) -> list[str]:
        taken: list[str] = []
        now = runtime.state.now
        while self._cursor < len(self.script) and self.script[self._cursor][0] <= now:
            _, action, kwargs = self.script[self._cursor]
            self._cursor += 1
            try:
                getattr(runtime, action)(**kwargs)
            except DevSimError as exc:
                logger.info("Scripted %s rejected: %s", action, exc)
                taken.append(f"rejected:{action}")
            else:
                taken.append(action)
        return taken

    def describe(self) -> str:
        return f"ScriptedActions({len(self.script)} steps)"


class CustomStrategy(Strategy):
    """Strategy defined by a callable."""

    def __init__(
        self,
        decide_fn: Callable[[SimulationRuntime], list[str]] | None = None,
        name: str = "Custom",
    ) -> None:
        self._decide_fn = decide_fn
        self._name = name

    def decide(self, runtime: SimulationRuntime) -> list[str]:
        if self._decide_fn:
            return self._decide_fn(runtime)
        return []

    def describe(self) -> str:
        return self._name


STRATEGY_REGISTRY: dict[str, type[Strategy]] = {
    "idle": Idle,
    "greedy": GreedyContractor,
    "scripted": ScriptedActions,
    "custom": CustomStrategy,
}
