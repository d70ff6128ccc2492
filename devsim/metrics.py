from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from devsim.events import (
    AchievementUnlocked,
    CompanyLeveledUp,
    ProjectCompleted,
    ProjectFailed,
)

if TYPE_CHECKING:
    from devsim.events import EventBus
    from devsim.state import SimulationState


@dataclass
class CompanySnapshot:
    time: float
    cash: float
    reputation: int
    level: int
    developers: int
    active_projects: int
    demand_multiplier: float
    monthly_expenses: float


@dataclass
class ProjectOutcome:
    time: float
    project_id: str
    project_type: str
    status: str
    final_reward: float
    quality: float
    bug_count: int


@dataclass
class ActionEvent:
    time: float
    action: str


@dataclass
class AchievementEvent:
    time: float
    achievement_id: str


@dataclass
class LevelEvent:
    time: float
    level: int


class MetricsCollector:
    """Collects simulation metrics at configurable intervals.

    Outcomes are captured from the event bus after attach(), so only
    committed ticks are ever recorded.
    """

    def __init__(self, snapshot_interval: float = 1.0) -> None:
        self.snapshot_interval = snapshot_interval
        self._last_snapshot_time: float = -1.0
        self._clock: Callable[[], float] = lambda: 0.0
        self._detach: list[Callable[[], None]] = []

        self.snapshots: list[CompanySnapshot] = []
        self.projects: list[ProjectOutcome] = []
        self.actions: list[ActionEvent] = []
        self.achievements: list[AchievementEvent] = []
        self.levels: list[LevelEvent] = []

    def attach(self, bus: EventBus, clock: Callable[[], float]) -> None:
        self._clock = clock
        self._detach = [
            bus.subscribe(ProjectCompleted, self._on_project),
            bus.subscribe(ProjectFailed, self._on_project),
            bus.subscribe(AchievementUnlocked, self._on_achievement),
            bus.subscribe(CompanyLeveledUp, self._on_level),
        ]

    def detach(self) -> None:
        for off in self._detach:
            off()
        self._detach = []

    def record_tick(self, state: SimulationState) -> None:
        """Record a snapshot if enough time has passed."""
        if state.now - self._last_snapshot_time >= self.snapshot_interval:
            self.take_snapshot(state)
            self._last_snapshot_time = state.now

    def record_action(self, time: float, action: str) -> None:
        self.actions.append(ActionEvent(time=time, action=action))

    def _on_project(self, event: ProjectCompleted | ProjectFailed) -> None:
        p = event.project
        self.projects.append(
            ProjectOutcome(
                time=p.closed_at if p.closed_at is not None else self._clock(),
                project_id=p.id,
                project_type=p.type,
                status=p.status.value,
                final_reward=getattr(event, "final_reward", 0.0),
                quality=p.quality,
                bug_count=p.bug_count,
            )
        )

    def _on_achievement(self, event: AchievementUnlocked) -> None:
        self.achievements.append(
            AchievementEvent(time=self._clock(), achievement_id=event.achievement.id)
        )

    def _on_level(self, event: CompanyLeveledUp) -> None:
        self.levels.append(LevelEvent(time=self._clock(), level=event.new_level))

    def take_snapshot(self, state: SimulationState) -> None:
        company = state.company
        self.snapshots.append(
            CompanySnapshot(
                time=state.now,
                cash=company.cash,
                reputation=company.reputation,
                level=company.level,
                developers=len(state.developers),
                active_projects=len(state.active),
                demand_multiplier=state.market.demand_multiplier,
                monthly_expenses=company.monthly_expenses,
            )
        )
