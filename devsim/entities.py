from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ProjectStatus(Enum):
    AVAILABLE = "available"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (ProjectStatus.COMPLETED, ProjectStatus.FAILED)


class EconomyHealth(Enum):
    RECESSION = "recession"
    STABLE = "stable"
    BOOMING = "booming"


@dataclass
class Company:
    """The player's studio. There is exactly one per simulation."""

    name: str = "DevSim Studios"
    cash: float = 0.0
    reputation: int = 50
    level: int = 1
    xp: int = 0
    office_level: int = 1
    max_developers: int = 4
    unlocked_technologies: set[str] = field(default_factory=set)
    unlocked_achievements: set[str] = field(default_factory=set)
    completed_project_count: int = 0
    failed_project_count: int = 0
    total_revenue: float = 0.0
    monthly_expenses: float = 0.0

    def adjust_reputation(self, delta: float) -> int:
        self.reputation = int(round(clamp(self.reputation + delta, 0, 100)))
        return self.reputation


@dataclass
class Feature:
    name: str
    complexity: int = 1
    implemented: bool = False


@dataclass
class Project:
    """A client contract, from the job board to its archived outcome."""

    id: str
    type: str
    name: str = ""
    client: str = ""
    difficulty: int = 1
    requirements: dict[str, int] = field(default_factory=dict)
    features: list[Feature] = field(default_factory=list)
    progress: float = 0.0
    quality: float = 0.0
    bug_count: int = 0
    reward: float = 0.0
    reputation_reward: int = 0
    deadline: float = 0.0
    assigned_developer_ids: set[str] = field(default_factory=set)
    status: ProjectStatus = ProjectStatus.AVAILABLE
    final_reward: float | None = None
    closed_at: float | None = None

    @property
    def implemented_fraction(self) -> float:
        if not self.features:
            return 1.0
        return sum(1 for f in self.features if f.implemented) / len(self.features)


@dataclass
class Developer:
    id: str
    name: str = ""
    skills: dict[str, float] = field(default_factory=dict)
    specialty: str = ""
    personality: str = ""
    level: int = 1
    experience: float = 0.0
    energy: float = 100.0
    mood: float = 80.0
    stress: float = 20.0
    salary: int = 0
    assigned_project_id: str | None = None
    burnout_risk: bool = False

    def skill(self, skill_id: str) -> float:
        return self.skills.get(skill_id, 0.0)

    def skill_match(self, requirements: dict[str, int]) -> float:
        """Mean over required skills of min(1, skill / required)."""
        if not requirements:
            return 1.0
        total = 0.0
        for skill_id, required in sorted(requirements.items()):
            if required <= 0:
                total += 1.0
            else:
                total += min(1.0, self.skill(skill_id) / required)
        return total / len(requirements)


@dataclass
class MarketState:
    demand_multiplier: float = 1.0
    trending_category: str = "web_app"
    economy_health: EconomyHealth = EconomyHealth.STABLE


@dataclass
class Stats:
    """Aggregate counters that are not owned by any single entity."""

    total_bugs_created: int = 0
    perfect_projects: int = 0
    bug_free_projects: int = 0
    total_expenses_paid: float = 0.0
    developers_hired: int = 0
    months_elapsed: int = 0
