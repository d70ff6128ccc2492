from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devsim.engine import Engine, TickContext
from devsim.events import AchievementUnlocked, Notification, Severity
from devsim.requirement import Req, Requirement
from devsim.view import StateView

if TYPE_CHECKING:
    from devsim.config import AchievementThresholds, SimulationConfig
    from devsim.events import EventBus
    from devsim.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementDef:
    """A one-time unlock that fires when its trigger is met."""

    id: str
    name: str = ""
    description: str = ""
    trigger: Requirement | None = None


def default_achievements(thresholds: AchievementThresholds) -> list[AchievementDef]:
    t = thresholds
    return [
        AchievementDef(
            "first_project",
            "First Steps",
            "Complete your first project",
            Req.completed_projects(">=", t.first_project),
        ),
        AchievementDef(
            "perfect_project",
            "Perfectionist",
            "Complete a project with 100% quality",
            Req.perfect_projects(">=", t.perfect_projects),
        ),
        AchievementDef(
            "bug_free",
            "Bug Free",
            f"Complete {t.bug_free_projects} projects without bugs",
            Req.bug_free_projects(">=", t.bug_free_projects),
        ),
        AchievementDef(
            "team_of_10",
            "Growing Team",
            f"Have {t.team_size} developers",
            Req.team_size(">=", t.team_size),
        ),
        AchievementDef(
            "millionaire",
            "Millionaire",
            f"Reach ${t.millionaire_cash:,.0f}",
            Req.cash(">=", t.millionaire_cash),
        ),
        AchievementDef(
            "tech_leader",
            "Tech Leader",
            "Research all technologies",
            Req.all_technologies(),
        ),
    ]


class AchievementEngine(Engine):
    """Unlocks catalog entries whose predicates became true.

    Predicates only ever see a frozen StateView. Unlocks are recorded on
    the company and never revoked or re-evaluated.
    """

    name = "achievements"

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        if config.achievements is not None:
            self.catalog = list(config.achievements)
        else:
            self.catalog = default_achievements(config.thresholds)

    def get(self, id: str) -> AchievementDef | None:
        for a in self.catalog:
            if a.id == id:
                return a
        return None

    def tick(self, state: SimulationState, ctx: TickContext) -> None:
        self.evaluate(state, ctx.bus)

    def evaluate(self, state: SimulationState, bus: EventBus) -> list[AchievementDef]:
        """Unlock every newly satisfied achievement; returns the new unlocks."""
        unlocked = state.company.unlocked_achievements
        view = StateView.of(state, self.config)
        fresh: list[AchievementDef] = []
        for adef in self.catalog:
            if adef.id in unlocked or adef.trigger is None:
                continue
            if adef.trigger.evaluate(view):
                fresh.append(adef)

        for adef in fresh:
            unlocked.add(adef.id)
            logger.info("Achievement unlocked: %s", adef.id)
            bus.publish(AchievementUnlocked(achievement=adef))
            bus.publish(
                Notification(
                    f"Achievement Unlocked: {adef.name} - {adef.description}",
                    Severity.SUCCESS,
                )
            )
        return fresh
