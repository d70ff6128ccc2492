from __future__ import annotations

import copy
import logging
import math
from typing import TYPE_CHECKING, Any, NoReturn

from devsim import codec
from devsim.achievement import AchievementEngine
from devsim.bonus import BonusKind, combined_multiplier
from devsim.clock import SimTickEvent, SimulationClock
from devsim.config import SimulationConfig, default_config
from devsim.developers import DeveloperEngine
from devsim.economy import EconomyLedger
from devsim.engine import Engine, TickContext
from devsim.entities import Developer, Project, ProjectStatus
from devsim.errors import (
    CapacityExceeded,
    DecodeError,
    DevSimError,
    InsufficientFunds,
    InvalidConfiguration,
    RequirementNotMet,
    TickAborted,
    UnknownEntity,
)
from devsim.events import (
    DeveloperHired,
    EventBus,
    Notification,
    ProjectStarted,
    ResourceChanged,
    Severity,
)
from devsim.factory import EntityFactory
from devsim.market import MarketEngine
from devsim.projects import ProjectEngine
from devsim.state import SimulationState
from devsim.view import StateView

if TYPE_CHECKING:
    from devsim.catalog import TechnologyDef

logger = logging.getLogger(__name__)

_TRACKED_RESOURCES = ("cash", "reputation", "xp")


class SimulationRuntime:
    """Tick orchestrator and the only entry point for player actions.

    Owns the SimulationState, the clock and the engines. Each tick runs
    projects, developers, market, economy and achievements in that order.
    A tick either commits completely or, if any engine raises, leaves the
    state exactly as it was before the tick.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        seed: int | None = None,
        bus: EventBus | None = None,
        state: SimulationState | None = None,
    ) -> None:
        self.config = (config or default_config()).check()
        self.bus = bus or EventBus()
        self.factory = EntityFactory(self.config)

        self.project_engine = ProjectEngine(self.config, self.factory)
        self.developer_engine = DeveloperEngine(self.config)
        self.market_engine = MarketEngine(self.config)
        self.economy = EconomyLedger(self.config)
        self.achievement_engine = AchievementEngine(self.config)
        self.engines: list[Engine] = [
            self.project_engine,
            self.developer_engine,
            self.market_engine,
            self.economy,
            self.achievement_engine,
        ]

        if state is None:
            state = SimulationState.initial(self.config, seed)
            self._populate(state)
        self.state = state
        if state.clock.speed not in self.config.clock.speed_multipliers:
            raise InvalidConfiguration(
                f"Saved speed {state.clock.speed!r} not allowed. "
                f"Expected one of {list(self.config.clock.speed_multipliers)}"
            )
        self.clock = SimulationClock(self.config.clock, self.state)
        self.state.company.monthly_expenses = self.economy.monthly_expenses(self.state)

    def _populate(self, state: SimulationState) -> None:
        for _ in range(self.config.projects.initial_available_projects):
            state.available.append(self.factory.generate_project(state))
        for _ in range(self.config.developers.initial_developers):
            dev = self.factory.generate_developer(state)
            state.developers[dev.id] = dev

    # ── Persistence ──────────────────────────────────────────────────

    def save(self) -> dict[str, Any]:
        """Encode the current state. Never called from inside a tick."""
        return codec.encode(self.state)

    @classmethod
    def from_save(
        cls,
        blob: dict[str, Any],
        config: SimulationConfig | None = None,
        bus: EventBus | None = None,
    ) -> SimulationRuntime:
        return cls(config=config, bus=bus, state=codec.decode(blob))

    @classmethod
    def load_or_new(
        cls,
        blob: dict[str, Any] | None,
        config: SimulationConfig | None = None,
        seed: int | None = None,
        bus: EventBus | None = None,
        fallback: bool = True,
    ) -> SimulationRuntime:
        """Load *blob*, or start fresh when it is missing or unreadable.

        With fallback=False a bad blob raises instead.
        """
        if blob is None:
            return cls(config=config, seed=seed, bus=bus)
        try:
            return cls.from_save(blob, config=config, bus=bus)
        except DecodeError as exc:
            if not fallback:
                raise
            logger.warning("Could not load save, starting a new game: %s", exc)
            runtime = cls(config=config, seed=seed, bus=bus)
            runtime.bus.publish(
                Notification("Save could not be loaded. Started a new game.", Severity.WARNING)
            )
            return runtime

    # ── Core loop ────────────────────────────────────────────────────

    def advance(self, real_delta_ms: float | None = None) -> SimTickEvent | None:
        """Run one tick of *real_delta_ms* wall-clock ms. No-op while paused."""
        if self.clock.paused:
            return None
        if real_delta_ms is None:
            real_delta_ms = self.config.clock.tick_interval_ms
        if real_delta_ms < 0:
            raise InvalidConfiguration(
                f"real_delta_ms must be non-negative, got {real_delta_ms!r}"
            )
        snapshot = self.state.snapshot() if self.config.transactional_ticks else None
        try:
            event = self.clock.tick(real_delta_ms)
        except Exception as exc:
            self._abort(self.state.clock.tick_index + 1, exc, snapshot)
        self.step(event, snapshot=snapshot)
        return event

    def step(self, event: SimTickEvent, snapshot: SimulationState | None = None) -> None:
        """Run every engine for *event* as one all-or-nothing tick.

        Events published during the tick are delivered only after it
        commits. On failure the state is restored from *snapshot* (taken
        here if not given) and TickAborted is raised.
        """
        if snapshot is None and self.config.transactional_ticks:
            snapshot = self.state.snapshot()
        before = self._resources()

        with self.bus.buffer():
            try:
                ctx = TickContext(event, self.bus, self._capture_assignments())
                for engine in self.engines:
                    engine.tick(self.state, ctx)
                self._publish_resource_changes(before)
            except Exception as exc:
                self._abort(event.tick_index, exc, snapshot)

    def _abort(
        self, tick_index: int, exc: Exception, snapshot: SimulationState | None
    ) -> NoReturn:
        if snapshot is not None:
            self.state.restore_from(snapshot)
        logger.exception("Tick %d aborted", tick_index)
        raise TickAborted(tick_index, exc) from exc

    def run_ticks(self, count: int, real_delta_ms: float | None = None) -> int:
        """Advance *count* ticks; returns how many actually ran."""
        ran = 0
        for _ in range(count):
            if self.advance(real_delta_ms) is None:
                break
            ran += 1
        return ran

    def run_for(self, sim_seconds: float) -> int:
        """Advance at the configured tick interval until *sim_seconds* pass."""
        if sim_seconds < 0:
            raise InvalidConfiguration(f"sim_seconds must be non-negative, got {sim_seconds!r}")
        target = self.clock.sim_time + sim_seconds
        ran = 0
        while self.clock.sim_time < target - 1e-9:
            if self.advance() is None:
                break
            ran += 1
        return ran

    def _capture_assignments(self) -> dict[str, Project]:
        assignments: dict[str, Project] = {}
        for dev_id, dev in sorted(self.state.developers.items()):
            pid = dev.assigned_project_id
            if pid is not None and pid in self.state.active:
                assignments[dev_id] = self.state.active[pid]
        return assignments

    def _resources(self) -> dict[str, float]:
        company = self.state.company
        return {
            "cash": company.cash,
            "reputation": company.reputation,
            "xp": company.xp,
        }

    def _publish_resource_changes(self, before: dict[str, float]) -> None:
        after = self._resources()
        for kind in _TRACKED_RESOURCES:
            if after[kind] != before[kind]:
                self.bus.publish(
                    ResourceChanged(kind=kind, value=after[kind], delta=after[kind] - before[kind])
                )

    # ── Clock controls ───────────────────────────────────────────────

    def set_speed(self, speed: float) -> None:
        try:
            self.clock.set_speed(speed)
        except InvalidConfiguration as exc:
            self._reject(exc)

    def pause(self) -> None:
        self.clock.pause()

    def resume(self) -> None:
        self.clock.resume()

    # ── Player actions ───────────────────────────────────────────────

    def accept_project(
        self, project_id: str, developer_ids: list[str] | None = None
    ) -> Project:
        """Move a project from the board to active and staff it.

        Without *developer_ids* the best free developer per required skill
        is picked, provided they reach half the required level; if nobody
        qualifies, the best overall match is assigned.
        """
        state = self.state
        project = state.available_project(project_id)
        if project is None:
            self._reject(UnknownEntity(f"No available project {project_id!r}"))

        cost = self.config.projects.accept_cost
        if state.company.cash < cost:
            self._reject(
                InsufficientFunds(
                    f"Accepting a project costs ${cost:,.0f}", cost, state.company.cash
                )
            )

        if developer_ids:
            team = [self._free_developer(d) for d in dict.fromkeys(developer_ids)]
            if len(team) > self.team_capacity():
                self._reject(
                    CapacityExceeded(
                        f"A project team holds at most {self.team_capacity()} developers"
                    )
                )
        else:
            team = self._auto_team(project)
        if not team:
            self._reject(CapacityExceeded("Not enough free developers!"))

        before = self._resources()
        state.company.cash -= cost
        state.available.remove(project)
        project.status = ProjectStatus.ACTIVE
        state.active[project.id] = project
        for dev in team:
            dev.assigned_project_id = project.id
            project.assigned_developer_ids.add(dev.id)

        logger.info(
            "Accepted project %s with team %s", project.id, sorted(project.assigned_developer_ids)
        )
        self.bus.publish(ProjectStarted(project=copy.deepcopy(project)))
        self.bus.publish(Notification(f'Started project "{project.name}"', Severity.INFO))
        self._after_action(before)
        return project

    def _auto_team(self, project: Project) -> list[Developer]:
        free = self.state.free_developers()
        if not free:
            return []
        capacity = self.team_capacity()
        min_ratio = self.config.projects.auto_assign_min_ratio
        team: list[Developer] = []
        for skill_id, required in sorted(project.requirements.items()):
            if len(team) >= capacity:
                break
            candidates = [d for d in free if d not in team]
            if not candidates:
                break
            # max() keeps the first of equal candidates, so ties go to the lower id
            best = max(candidates, key=lambda d: d.skill(skill_id))
            if best.skill(skill_id) >= required * min_ratio:
                team.append(best)
        if not team:
            team.append(max(free, key=lambda d: d.skill_match(project.requirements)))
        return team

    def assign_developer(self, developer_id: str, project_id: str) -> None:
        state = self.state
        project = state.active.get(project_id)
        if project is None:
            if state.find_project(project_id) is None:
                self._reject(UnknownEntity(f"No project {project_id!r}"))
            self._reject(RequirementNotMet(f"Project {project_id!r} is not active"))
        dev = self._free_developer(developer_id)
        if len(project.assigned_developer_ids) >= self.team_capacity():
            self._reject(
                CapacityExceeded(
                    f"A project team holds at most {self.team_capacity()} developers"
                )
            )
        dev.assigned_project_id = project.id
        project.assigned_developer_ids.add(dev.id)
        logger.info("Assigned %s to %s", dev.id, project.id)

    def unassign_developer(self, developer_id: str) -> None:
        dev = self._developer(developer_id)
        pid = dev.assigned_project_id
        if pid is None:
            self._reject(RequirementNotMet(f"{dev.name} is not assigned to a project"))
        project = self.state.active.get(pid)
        if project is not None:
            project.assigned_developer_ids.discard(dev.id)
        dev.assigned_project_id = None
        logger.info("Unassigned %s from %s", dev.id, pid)

    def hire_cost(self) -> float:
        dcfg = self.config.developers
        return dcfg.hire_cost_scaling.compute(dcfg.hire_base_cost, len(self.state.developers))

    def hire_developer(self) -> Developer:
        state = self.state
        company = state.company
        if len(state.developers) >= company.max_developers:
            self._reject(CapacityExceeded("Office at max capacity! Upgrade needed."))
        cost = self.hire_cost()
        if company.cash < cost:
            self._reject(
                InsufficientFunds(f"Hiring costs ${cost:,.0f}", cost, company.cash)
            )

        before = self._resources()
        dev = self.factory.generate_developer(state)
        state.developers[dev.id] = dev
        company.cash -= cost
        state.stats.developers_hired += 1
        company.monthly_expenses = self.economy.monthly_expenses(state)

        logger.info("Hired %s (%s) for %.0f", dev.id, dev.name, cost)
        self.bus.publish(DeveloperHired(developer=copy.deepcopy(dev)))
        self.bus.publish(Notification(f"Hired {dev.name}!", Severity.SUCCESS))
        self._after_action(before)
        return dev

    def research_technology(self, technology_id: str) -> TechnologyDef:
        company = self.state.company
        tech = self.config.get_technology(technology_id)
        if tech is None:
            self._reject(UnknownEntity(f"No technology {technology_id!r}"))
        if tech.id in company.unlocked_technologies:
            self._reject(RequirementNotMet(f"{tech.display_name} already researched"))
        if company.level < tech.level:
            self._reject(RequirementNotMet(f"Requires company level {tech.level}!"))
        if company.cash < tech.cost:
            self._reject(
                InsufficientFunds(
                    f"{tech.display_name} costs ${tech.cost:,.0f}", tech.cost, company.cash
                )
            )

        before = self._resources()
        company.cash -= tech.cost
        company.unlocked_technologies.add(tech.id)
        company.monthly_expenses = self.economy.monthly_expenses(self.state)

        logger.info("Researched %s", tech.id)
        self.bus.publish(Notification(f"Researched {tech.display_name}!", Severity.SUCCESS))
        self._after_action(before)
        return tech

    def upgrade_office(self) -> int:
        company = self.state.company
        office = self.config.get_office(company.office_level + 1)
        if office is None:
            self._reject(RequirementNotMet("Office is already at the highest level"))
        if company.cash < office.cost:
            self._reject(
                InsufficientFunds(
                    f"{office.display_name} costs ${office.cost:,.0f}",
                    office.cost,
                    company.cash,
                )
            )

        before = self._resources()
        company.cash -= office.cost
        company.office_level = office.level
        company.max_developers = office.max_developers
        company.monthly_expenses = self.economy.monthly_expenses(self.state)

        logger.info("Office upgraded to level %d", office.level)
        self.bus.publish(
            Notification(f"Moved to {office.display_name}!", Severity.SUCCESS)
        )
        self._after_action(before)
        return office.level

    # ── Queries ──────────────────────────────────────────────────────

    def team_capacity(self) -> int:
        mult = combined_multiplier(
            self.state.company.unlocked_technologies,
            self.config.technologies_by_id,
            BonusKind.SCALABILITY,
        )
        return max(1, math.floor(self.config.projects.max_team_size * mult))

    def view(self) -> StateView:
        return StateView.of(self.state, self.config)

    def monthly_expenses(self) -> float:
        return self.economy.monthly_expenses(self.state)

    # ── Private helpers ──────────────────────────────────────────────

    def _developer(self, developer_id: str) -> Developer:
        dev = self.state.developers.get(developer_id)
        if dev is None:
            self._reject(UnknownEntity(f"No developer {developer_id!r}"))
        return dev

    def _free_developer(self, developer_id: str) -> Developer:
        dev = self._developer(developer_id)
        if dev.assigned_project_id is not None:
            self._reject(
                RequirementNotMet(
                    f"{dev.name} is already working on {dev.assigned_project_id}"
                )
            )
        return dev

    def _after_action(self, before: dict[str, float]) -> None:
        self._publish_resource_changes(before)
        self.achievement_engine.evaluate(self.state, self.bus)

    def _reject(self, exc: DevSimError) -> NoReturn:
        logger.info("Action rejected: %s", exc)
        self.bus.publish(Notification(str(exc), Severity.ERROR))
        raise exc
