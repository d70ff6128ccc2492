from __future__ import annotations

import math
from typing import TYPE_CHECKING

from devsim import catalog
from devsim.entities import Developer, Feature, MarketState, Project, clamp

if TYPE_CHECKING:
    from devsim.config import SimulationConfig
    from devsim.state import SimulationState


class EntityFactory:
    """Generates projects and developers with bounded random attributes.

    Every draw goes through the state's RandomSource, so a fixed seed
    replays the same job board and the same hiring pool.
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config

    # ── Projects ─────────────────────────────────────────────────────

    def generate_project(
        self,
        state: SimulationState,
        company_level: int | None = None,
        market: MarketState | None = None,
    ) -> Project:
        gen = self.config.generation
        rng = state.rng
        level = state.company.level if company_level is None else company_level
        market = state.market if market is None else market

        ptype = rng.choice(self.config.project_types)
        raw = level // gen.levels_per_difficulty + rng.uniform(0.0, gen.difficulty_jitter)
        difficulty = int(clamp(raw, gen.difficulty_min, gen.difficulty_max))

        size = difficulty * rng.uniform(*gen.size_range)
        reward = (
            gen.base_reward_unit
            * size
            * ptype.base_reward
            * difficulty
            * rng.uniform(*gen.reward_jitter)
            * market.demand_multiplier
        )

        project = Project(
            id=state.issue_id("project"),
            type=ptype.id,
            name=self._project_name(state, ptype),
            client=rng.choice(catalog.CLIENT_NAMES),
            difficulty=difficulty,
            requirements=self._requirements(state, ptype.skills, difficulty),
            features=self._features(state, difficulty),
            reward=float(math.floor(reward)),
            reputation_reward=difficulty * self.config.projects.reputation_per_difficulty,
            deadline=state.now
            + gen.deadline_base
            + difficulty * gen.deadline_per_difficulty,
        )
        return project

    def _requirements(
        self, state: SimulationState, template: tuple[str, ...], difficulty: int
    ) -> dict[str, int]:
        gen = self.config.generation
        skills = template or self.config.skills
        count = min(len(skills), 2 + difficulty // 2)
        return {
            skill: gen.requirement_base
            + difficulty * gen.requirement_per_difficulty
            + state.rng.randint(0, gen.requirement_jitter)
            for skill in skills[:count]
        }

    def _features(self, state: SimulationState, difficulty: int) -> list[Feature]:
        gen = self.config.generation
        rng = state.rng
        count = gen.base_features + difficulty // 2 + rng.randint(0, gen.feature_jitter)
        return [
            Feature(
                name=rng.choice(catalog.FEATURE_NAMES),
                complexity=rng.randint(1, difficulty),
            )
            for _ in range(count)
        ]

    def _project_name(self, state: SimulationState, ptype: catalog.ProjectTypeDef) -> str:
        rng = state.rng
        words = ptype.name_words or (ptype.display_name or ptype.id,)
        word = rng.choice(words)
        if rng.random() > 0.5:
            return f"{rng.choice(catalog.PROJECT_NAME_PREFIXES)} {word}"
        return f"{word} {rng.choice(catalog.PROJECT_NAME_SUFFIXES)}"

    # ── Developers ───────────────────────────────────────────────────

    def generate_developer(self, state: SimulationState) -> Developer:
        gen = self.config.generation
        rng = state.rng

        skills: dict[str, float] = {
            skill: float(rng.randint(*gen.skill_range)) for skill in self.config.skills
        }
        specialty = rng.choice(self.config.skills)
        skills[specialty] = max(
            skills[specialty], float(rng.randint(*gen.specialty_range))
        )

        mean_skill = sum(skills.values()) / len(skills)
        level = int(mean_skill // 20) + 1

        return Developer(
            id=state.issue_id("dev"),
            name=rng.choice(catalog.DEVELOPER_NAMES),
            skills=skills,
            specialty=specialty,
            personality=rng.choice(catalog.PERSONALITIES),
            level=level,
            energy=gen.starting_energy,
            mood=gen.starting_mood,
            stress=gen.starting_stress,
            salary=gen.base_salary
            + level * gen.salary_per_level
            + rng.randint(0, gen.salary_jitter),
        )
