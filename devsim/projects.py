from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devsim.bonus import BonusKind, combined_multiplier
from devsim.engine import Engine, TickContext
from devsim.entities import Developer, Project, ProjectStatus
from devsim.events import (
    CompanyLeveledUp,
    Notification,
    ProjectCompleted,
    ProjectFailed,
    Severity,
)

if TYPE_CHECKING:
    from devsim.config import SimulationConfig
    from devsim.events import EventBus
    from devsim.factory import EntityFactory
    from devsim.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamOutput:
    """Per-tick aggregate of the developers assigned to one project."""

    productivity: float
    quality: float
    contributors: int


class ProjectEngine(Engine):
    """Advances active projects and settles the ones that finish or expire.

    Completion is checked before the deadline: a project that reaches 100%
    on the tick its deadline passes is completed, not failed.
    """

    name = "projects"

    def __init__(self, config: SimulationConfig, factory: EntityFactory) -> None:
        self.config = config
        self.factory = factory

    # ── Core loop ────────────────────────────────────────────────────

    def tick(self, state: SimulationState, ctx: TickContext) -> None:
        for project in state.iter_active():
            self._advance(state, project, ctx)
        self._refresh_board(state, ctx)

    def _advance(self, state: SimulationState, project: Project, ctx: TickContext) -> None:
        cfg = self.config.projects
        dt = ctx.dt
        team = self.team_output(state, project)

        project.progress = min(
            100.0, project.progress + team.productivity * cfg.progress_scale * dt
        )
        project.quality = min(
            100.0, project.quality + team.quality * cfg.quality_scale * dt
        )

        if team.contributors > 0:
            bug_mult = combined_multiplier(
                state.company.unlocked_technologies,
                self.config.technologies_by_id,
                BonusKind.BUG_RATE,
            )
            bug_chance = cfg.base_bug_rate * bug_mult * (1.0 - min(1.0, team.quality)) * dt
            if state.rng.chance(bug_chance):
                project.bug_count += 1
                project.quality = max(0.0, project.quality - cfg.bug_quality_penalty)
                state.stats.total_bugs_created += 1

        self._implement_features(project)

        if project.progress >= 100.0:
            self.complete(state, project, ctx.bus)
        elif ctx.now > project.deadline:
            self.fail(state, project, ctx.bus)

    def team_output(self, state: SimulationState, project: Project) -> TeamOutput:
        """Mean of skill_match * energy * mood over developers with energy left."""
        floor = self.config.developers.min_working_energy
        contributions: list[float] = []
        for dev_id in sorted(project.assigned_developer_ids):
            dev = state.developers.get(dev_id)
            if dev is None or dev.energy <= floor:
                continue
            contributions.append(self.contribution(dev, project))

        if not contributions:
            return TeamOutput(0.0, 0.0, 0)

        base = sum(contributions) / len(contributions)
        owned = state.company.unlocked_technologies
        techs = self.config.technologies_by_id
        return TeamOutput(
            productivity=base * combined_multiplier(owned, techs, BonusKind.PRODUCTIVITY),
            quality=base * combined_multiplier(owned, techs, BonusKind.QUALITY),
            contributors=len(contributions),
        )

    @staticmethod
    def contribution(dev: Developer, project: Project) -> float:
        return dev.skill_match(project.requirements) * (dev.energy / 100.0) * (dev.mood / 100.0)

    @staticmethod
    def _implement_features(project: Project) -> None:
        if not project.features:
            return
        step = 100.0 / len(project.features)
        for i, feature in enumerate(project.features):
            if not feature.implemented and project.progress >= (i + 1) * step:
                feature.implemented = True

    def _refresh_board(self, state: SimulationState, ctx: TickContext) -> None:
        cfg = self.config.projects
        state.available = [p for p in state.available if p.deadline >= ctx.now]
        if len(state.available) < cfg.max_available_projects:
            if state.rng.chance(cfg.project_spawn_rate * ctx.dt):
                project = self.factory.generate_project(state)
                state.available.append(project)
                logger.debug("New contract on the board: %s (%s)", project.id, project.type)

    # ── Settlement ───────────────────────────────────────────────────

    def final_reward(self, state: SimulationState, project: Project) -> float:
        cfg = self.config.projects
        reward = project.reward * (project.quality / 100.0)
        reward *= max(cfg.min_bug_multiplier, 1.0 - project.bug_count * cfg.bug_penalty_rate)
        floor = cfg.feature_bonus_floor
        reward *= floor + (1.0 - floor) * project.implemented_fraction
        if project.type == state.market.trending_category:
            reward *= cfg.trending_bonus
        return float(math.floor(reward))

    def complete(self, state: SimulationState, project: Project, bus: EventBus) -> float:
        cfg = self.config.projects
        company = state.company
        final = self.final_reward(state, project)

        project.status = ProjectStatus.COMPLETED
        project.final_reward = final
        project.closed_at = state.now
        self._release(state, project)

        company.cash += final
        company.total_revenue += final
        company.completed_project_count += 1
        company.adjust_reputation(project.reputation_reward)
        if project.quality >= 100.0:
            state.stats.perfect_projects += 1
        if project.bug_count == 0:
            state.stats.bug_free_projects += 1
        self.grant_xp(state, project.difficulty * cfg.xp_per_difficulty, bus)

        logger.info(
            "Project %s completed: reward=%.0f quality=%.1f bugs=%d",
            project.id, final, project.quality, project.bug_count,
        )
        bus.publish(ProjectCompleted(project=copy.deepcopy(project), final_reward=final))
        bus.publish(
            Notification(
                f'Project "{project.name}" completed! Earned ${final:,.0f}',
                Severity.SUCCESS,
            )
        )
        return final

    def fail(self, state: SimulationState, project: Project, bus: EventBus) -> None:
        cfg = self.config.projects
        project.status = ProjectStatus.FAILED
        project.closed_at = state.now
        self._release(state, project)

        state.company.failed_project_count += 1
        state.company.adjust_reputation(
            -project.reputation_reward * cfg.failure_penalty_ratio
        )

        logger.info("Project %s failed: deadline %.1f missed", project.id, project.deadline)
        bus.publish(ProjectFailed(project=copy.deepcopy(project)))
        bus.publish(
            Notification(
                f'Project "{project.name}" failed - Deadline missed!',
                Severity.ERROR,
            )
        )

    def _release(self, state: SimulationState, project: Project) -> None:
        for dev_id in sorted(project.assigned_developer_ids):
            dev = state.developers.get(dev_id)
            if dev is not None and dev.assigned_project_id == project.id:
                dev.assigned_project_id = None
        project.assigned_developer_ids = set()
        state.active.pop(project.id, None)
        state.archive.append(project)

    def grant_xp(self, state: SimulationState, amount: int, bus: EventBus) -> None:
        company = state.company
        per_level = self.config.economy.company_xp_per_level
        company.xp += amount
        while company.xp >= company.level * per_level:
            company.xp -= company.level * per_level
            company.level += 1
            logger.info("Company reached level %d", company.level)
            bus.publish(CompanyLeveledUp(new_level=company.level))
            bus.publish(
                Notification(f"Company leveled up to {company.level}!", Severity.SUCCESS)
            )
