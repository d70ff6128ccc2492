from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devsim.config import SimulationConfig
    from devsim.state import SimulationState


@dataclass(frozen=True)
class StateView:
    """Read-only aggregate snapshot used by achievement predicates.

    Built from the live state but sharing no mutable objects with it, so a
    predicate has nothing it could mutate.
    """

    cash: float
    reputation: int
    company_level: int
    company_xp: int
    office_level: int
    completed_projects: int
    failed_projects: int
    total_revenue: float
    perfect_projects: int
    bug_free_projects: int
    total_bugs_created: int
    team_size: int
    max_developer_level: int
    active_projects: int
    technologies: frozenset[str]
    technology_catalog: frozenset[str]
    achievements: frozenset[str]
    demand_multiplier: float
    sim_time: float
    tick_index: int

    @classmethod
    def of(cls, state: SimulationState, config: SimulationConfig) -> StateView:
        company = state.company
        return cls(
            cash=company.cash,
            reputation=company.reputation,
            company_level=company.level,
            company_xp=company.xp,
            office_level=company.office_level,
            completed_projects=company.completed_project_count,
            failed_projects=company.failed_project_count,
            total_revenue=company.total_revenue,
            perfect_projects=state.stats.perfect_projects,
            bug_free_projects=state.stats.bug_free_projects,
            total_bugs_created=state.stats.total_bugs_created,
            team_size=len(state.developers),
            max_developer_level=max(
                (d.level for d in state.developers.values()), default=0
            ),
            active_projects=len(state.active),
            technologies=frozenset(company.unlocked_technologies),
            technology_catalog=frozenset(t.id for t in config.technologies),
            achievements=frozenset(company.unlocked_achievements),
            demand_multiplier=state.market.demand_multiplier,
            sim_time=state.clock.sim_time,
            tick_index=state.clock.tick_index,
        )
