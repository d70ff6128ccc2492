"""Tighter economy for balance runs: pricier hires, shorter deadlines, rarer contracts."""
from __future__ import annotations

from devsim.achievement import AchievementDef
from devsim.config import (
    DeveloperConfig,
    EconomyConfig,
    GenerationConfig,
    ProjectConfig,
    SimulationConfig,
)
from devsim.cost_scaling import CostScaling
from devsim.requirement import Req


def define_config() -> SimulationConfig:
    return SimulationConfig(
        name="DevSim Tycoon (hard)",
        generation=GenerationConfig(
            deadline_base=200.0,
            deadline_per_difficulty=90.0,
        ),
        projects=ProjectConfig(
            accept_cost=2_000.0,
            project_spawn_rate=0.05,
            failure_penalty_ratio=1.5,
        ),
        developers=DeveloperConfig(
            hire_base_cost=8_000.0,
            hire_cost_curve=CostScaling.exponential(1.4),
        ),
        economy=EconomyConfig(
            starting_cash=30_000.0,
            office_rent_unit=1_500.0,
        ),
        achievements=[
            AchievementDef(
                "first_project",
                "First Steps",
                "Complete your first project",
                Req.completed_projects(">=", 1),
            ),
            AchievementDef(
                "survivor",
                "Survivor",
                "Reach one simulated hour with a positive balance",
                Req.time(">=", 3600) & Req.cash(">", 0),
            ),
            AchievementDef(
                "spotless",
                "Spotless",
                "Deliver three projects without a single bug",
                Req.bug_free_projects(">=", 3),
            ),
        ],
    )
