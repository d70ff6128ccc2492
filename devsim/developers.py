from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from devsim.engine import Engine, TickContext
from devsim.entities import Developer, Project, clamp
from devsim.events import DeveloperLeveledUp, EnergyChanged, Notification, Severity

if TYPE_CHECKING:
    from devsim.config import SimulationConfig
    from devsim.state import SimulationState

logger = logging.getLogger(__name__)


class DeveloperEngine(Engine):
    """Energy, stress, mood, experience and skill growth for every developer.

    A developer counts as working this tick if it was assigned when the tick
    started, even when ProjectEngine released it earlier in the same tick.
    """

    name = "developers"

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config

    def tick(self, state: SimulationState, ctx: TickContext) -> None:
        energy_before = self.mean_energy(state)
        for dev_id in sorted(state.developers):
            dev = state.developers[dev_id]
            project = ctx.assignments.get(dev_id)
            if project is not None:
                self._work(dev, project, ctx.dt)
            else:
                self._rest(dev, ctx.dt)
            self._update_mood(dev)
            self._update_burnout(dev, ctx)
            self._check_level_up(dev, ctx)

        energy_after = self.mean_energy(state)
        if energy_after != energy_before:
            ctx.bus.publish(EnergyChanged(value=energy_after))

    # ── Per developer ────────────────────────────────────────────────

    def _work(self, dev: Developer, project: Project, dt: float) -> None:
        cfg = self.config.developers
        dev.energy = clamp(dev.energy - cfg.energy_drain_rate * dt, 0.0, 100.0)
        dev.stress = clamp(dev.stress + cfg.stress_gain_rate * dt, 0.0, 100.0)
        dev.experience += cfg.xp_gain_rate * dt
        for skill_id in sorted(project.requirements):
            dev.skills[skill_id] = min(
                100.0, dev.skill(skill_id) + cfg.skill_gain_rate * dt
            )

    def _rest(self, dev: Developer, dt: float) -> None:
        cfg = self.config.developers
        dev.energy = clamp(dev.energy + cfg.energy_recovery_rate * dt, 0.0, 100.0)
        dev.stress = clamp(dev.stress - cfg.stress_recovery_rate * dt, 0.0, 100.0)

    def _update_mood(self, dev: Developer) -> None:
        cfg = self.config.developers
        energy_term = (
            cfg.mood_energy_bonus
            if dev.energy > cfg.mood_energy_threshold
            else -cfg.mood_energy_bonus
        )
        dev.mood = clamp(
            cfg.mood_base + energy_term - dev.stress * cfg.mood_stress_weight,
            0.0,
            100.0,
        )

    def _update_burnout(self, dev: Developer, ctx: TickContext) -> None:
        cfg = self.config.developers
        at_risk = dev.stress > cfg.burnout_stress and dev.energy < cfg.burnout_energy
        if at_risk and not dev.burnout_risk:
            logger.info("Developer %s at risk of burnout", dev.id)
            ctx.bus.publish(
                Notification(f"{dev.name} is at risk of burnout!", Severity.WARNING)
            )
        dev.burnout_risk = at_risk

    def _check_level_up(self, dev: Developer, ctx: TickContext) -> None:
        cfg = self.config.developers
        while dev.experience >= dev.level * cfg.xp_per_level:
            dev.experience -= dev.level * cfg.xp_per_level
            dev.level += 1
            dev.salary = int(round(dev.salary * cfg.salary_growth))
            logger.info("Developer %s reached level %d", dev.id, dev.level)
            ctx.bus.publish(
                DeveloperLeveledUp(developer=copy.deepcopy(dev), new_level=dev.level)
            )
            ctx.bus.publish(
                Notification(
                    f"{dev.name} leveled up to {dev.level}!", Severity.SUCCESS
                )
            )

    # ── Team aggregate ───────────────────────────────────────────────

    @staticmethod
    def mean_energy(state: SimulationState) -> float:
        if not state.developers:
            return 0.0
        return sum(d.energy for d in state.developers.values()) / len(state.developers)

