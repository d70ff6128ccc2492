"""Tunable constants, grouped by the engine that consumes them."""

from __future__ import annotations

import importlib
import warnings
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devsim import catalog
from devsim.catalog import MarketEventDef, OfficeDef, ProjectTypeDef, TechnologyDef
from devsim.cost_scaling import CostScaling
from devsim.errors import InvalidConfiguration

if TYPE_CHECKING:
    from devsim.achievement import AchievementDef


@dataclass(frozen=True)
class ClockConfig:
    tick_interval_ms: float = 100.0
    speed_multipliers: tuple[float, ...] = (1, 2, 5, 10)
    default_speed: float = 1


@dataclass(frozen=True)
class GenerationConfig:
    """Ranges used by the entity factory. Integer ranges are inclusive."""

    skill_range: tuple[int, int] = (10, 49)
    specialty_range: tuple[int, int] = (50, 79)
    starting_energy: float = 100.0
    starting_mood: float = 80.0
    starting_stress: float = 20.0
    base_salary: int = 3000
    salary_per_level: int = 1000
    salary_jitter: int = 1999
    difficulty_min: int = 1
    difficulty_max: int = 5
    levels_per_difficulty: int = 3
    difficulty_jitter: float = 2.0
    size_range: tuple[float, float] = (20.0, 50.0)
    base_reward_unit: float = 100.0
    reward_jitter: tuple[float, float] = (0.8, 1.2)
    requirement_base: int = 20
    requirement_per_difficulty: int = 15
    requirement_jitter: int = 19
    deadline_base: float = 300.0
    deadline_per_difficulty: float = 120.0
    base_features: int = 3
    feature_jitter: int = 2


@dataclass(frozen=True)
class ProjectConfig:
    progress_scale: float = 2.0
    quality_scale: float = 1.5
    base_bug_rate: float = 0.05
    bug_quality_penalty: float = 5.0
    bug_penalty_rate: float = 0.05
    min_bug_multiplier: float = 0.5
    feature_bonus_floor: float = 0.8
    trending_bonus: float = 1.25
    failure_penalty_ratio: float = 1.0
    xp_per_difficulty: int = 10
    reputation_per_difficulty: int = 5
    accept_cost: float = 1000.0
    max_team_size: int = 4
    auto_assign_min_ratio: float = 0.5
    initial_available_projects: int = 5
    max_available_projects: int = 8
    project_spawn_rate: float = 0.1


@dataclass(frozen=True)
class DeveloperConfig:
    energy_drain_rate: float = 5.0
    stress_gain_rate: float = 3.0
    xp_gain_rate: float = 0.5
    skill_gain_rate: float = 0.1
    energy_recovery_rate: float = 10.0
    stress_recovery_rate: float = 5.0
    mood_base: float = 100.0
    mood_energy_threshold: float = 50.0
    mood_energy_bonus: float = 10.0
    mood_stress_weight: float = 0.5
    burnout_stress: float = 80.0
    burnout_energy: float = 20.0
    # Developers at or below this energy stop contributing to their project
    min_working_energy: float = 0.0
    xp_per_level: float = 50.0
    salary_growth: float = 1.1
    hire_base_cost: float = 5000.0
    hire_cost_step: float = 2000.0
    # Overrides the additive hire_cost_step curve when set
    hire_cost_curve: CostScaling | None = None
    initial_developers: int = 2

    @property
    def hire_cost_scaling(self) -> CostScaling:
        if self.hire_cost_curve is not None:
            return self.hire_cost_curve
        return CostScaling.additive(self.hire_cost_step)


@dataclass(frozen=True)
class MarketConfig:
    demand_min: float = 0.5
    demand_max: float = 2.0
    initial_demand: float = 1.0
    initial_trending: str = "web_app"
    demand_shift_rate: float = 0.01
    demand_step: float = 0.2
    trend_shift_rate: float = 0.005
    market_event_rate: float = 0.02
    recession_below: float = 0.8
    booming_above: float = 1.3


@dataclass(frozen=True)
class EconomyConfig:
    company_name: str = "DevSim Studios"
    starting_cash: float = 50_000.0
    starting_reputation: int = 50
    office_rent_unit: float = 1000.0
    maintenance_unit: float = 500.0
    seconds_per_month: float = 72.0
    company_xp_per_level: int = 100


@dataclass(frozen=True)
class AchievementThresholds:
    first_project: int = 1
    perfect_projects: int = 1
    bug_free_projects: int = 5
    team_size: int = 10
    millionaire_cash: float = 1_000_000.0


@dataclass
class SimulationConfig:
    """Complete tunable surface of the simulation.

    Built once at startup and handed to every engine; engines never read
    module-level constants directly.
    """

    name: str = "DevSim Tycoon"
    clock: ClockConfig = field(default_factory=ClockConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    projects: ProjectConfig = field(default_factory=ProjectConfig)
    developers: DeveloperConfig = field(default_factory=DeveloperConfig)
    market: MarketConfig = field(default_factory=MarketConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    thresholds: AchievementThresholds = field(default_factory=AchievementThresholds)

    skills: tuple[str, ...] = catalog.SKILLS
    project_types: tuple[ProjectTypeDef, ...] = catalog.PROJECT_TYPES
    technologies: tuple[TechnologyDef, ...] = catalog.TECHNOLOGIES
    offices: tuple[OfficeDef, ...] = catalog.OFFICES
    market_events: tuple[MarketEventDef, ...] = catalog.MARKET_EVENTS
    # None selects the built-in catalog from devsim.achievement
    achievements: list[AchievementDef] | None = None
    transactional_ticks: bool = True

    # Lookup dicts built in __post_init__
    _project_types_by_id: dict[str, ProjectTypeDef] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _technologies_by_id: dict[str, TechnologyDef] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _offices_by_level: dict[int, OfficeDef] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._project_types_by_id = {p.id: p for p in self.project_types}
        self._technologies_by_id = {t.id: t for t in self.technologies}
        self._offices_by_level = {o.level: o for o in self.offices}

    @property
    def project_type_ids(self) -> list[str]:
        return [p.id for p in self.project_types]

    @property
    def technologies_by_id(self) -> dict[str, TechnologyDef]:
        return self._technologies_by_id

    def get_project_type(self, id: str) -> ProjectTypeDef | None:
        return self._project_types_by_id.get(id)

    def get_technology(self, id: str) -> TechnologyDef | None:
        return self._technologies_by_id.get(id)

    def get_office(self, level: int) -> OfficeDef | None:
        return self._offices_by_level.get(level)

    def validate(self) -> list[str]:
        """List every tuning problem found; an empty list means the config is usable."""
        errors: list[str] = []

        speeds = self.clock.speed_multipliers
        if not speeds:
            errors.append("clock.speed_multipliers must not be empty")
        elif any(s <= 0 for s in speeds):
            errors.append(f"clock.speed_multipliers must be positive: {speeds!r}")
        if self.clock.default_speed not in speeds:
            errors.append(
                f"clock.default_speed {self.clock.default_speed!r} "
                f"is not one of {speeds!r}"
            )
        if self.clock.tick_interval_ms <= 0:
            errors.append("clock.tick_interval_ms must be positive")

        gen = self.generation
        for label, (low, high) in (
            ("generation.skill_range", gen.skill_range),
            ("generation.specialty_range", gen.specialty_range),
            ("generation.size_range", gen.size_range),
            ("generation.reward_jitter", gen.reward_jitter),
        ):
            if low > high:
                errors.append(f"{label} is inverted: ({low}, {high})")
        if gen.skill_range[0] < 0 or gen.specialty_range[1] > 100:
            errors.append("generated skill levels must stay within [0, 100]")
        if gen.difficulty_min < 1 or gen.difficulty_min > gen.difficulty_max:
            errors.append(
                f"generation difficulty bounds invalid: "
                f"({gen.difficulty_min}, {gen.difficulty_max})"
            )

        mkt = self.market
        if not 0 < mkt.demand_min <= mkt.initial_demand <= mkt.demand_max:
            errors.append(
                "market demand bounds must satisfy "
                "0 < demand_min <= initial_demand <= demand_max"
            )
        if mkt.initial_trending not in self._project_types_by_id:
            errors.append(
                f"market.initial_trending references unknown project type "
                f"{mkt.initial_trending!r}"
            )

        # Duplicate and dangling catalog references
        seen: set[str] = set()
        for p in self.project_types:
            if p.id in seen:
                errors.append(f"Duplicate project type ID: {p.id!r}")
            seen.add(p.id)
            for skill in p.skills:
                if skill not in self.skills:
                    errors.append(
                        f"Project type {p.id!r} references unknown skill {skill!r}"
                    )
        seen = set()
        for t in self.technologies:
            if t.id in seen:
                errors.append(f"Duplicate technology ID: {t.id!r}")
            seen.add(t.id)
        for ev in self.market_events:
            if ev.trending is not None and ev.trending not in self._project_types_by_id:
                errors.append(
                    f"Market event {ev.id!r} trends unknown project type {ev.trending!r}"
                )

        levels = sorted(self._offices_by_level)
        if not levels or levels[0] != 1:
            errors.append("offices must start at level 1")
        elif levels != list(range(1, len(levels) + 1)):
            errors.append(f"office levels must be contiguous: {levels!r}")

        if self.projects.max_team_size < 1:
            errors.append("projects.max_team_size must be at least 1")
        if self.economy.seconds_per_month <= 0:
            errors.append("economy.seconds_per_month must be positive")
        if self.developers.xp_per_level <= 0:
            errors.append("developers.xp_per_level must be positive")

        if (
            self.projects.trending_bonus > 1.0
            and self.projects.feature_bonus_floor > 1.0
        ):
            warnings.warn(
                "feature_bonus_floor above 1.0 combined with a trending bonus "
                "lets payouts exceed the contract reward even at low quality.",
                stacklevel=2,
            )

        return errors

    def check(self) -> SimulationConfig:
        """Raise InvalidConfiguration if validate() reports errors."""
        errors = self.validate()
        if errors:
            raise InvalidConfiguration(
                "Invalid SimulationConfig:\n" + "\n".join(f"  - {e}" for e in errors)
            )
        return self


def default_config() -> SimulationConfig:
    """Values taken from the original tuning of the game."""
    return SimulationConfig()


def load_config(module_path: str) -> SimulationConfig:
    """Import *module_path* and call its define_config()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_config"):
        raise InvalidConfiguration(
            f"module {module_path!r} has no define_config() function"
        )
    return mod.define_config().check()
