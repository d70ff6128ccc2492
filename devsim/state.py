from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Iterator

from devsim.entities import Company, Developer, MarketState, Project, ProjectStatus, Stats
from devsim.rng import RandomSource

if TYPE_CHECKING:
    from devsim.config import SimulationConfig


@dataclass
class ClockState:
    speed: float = 1
    paused: bool = False
    tick_index: int = 0
    sim_time: float = 0.0


@dataclass
class SimulationState:
    """Mutable container holding all persistent simulation state.

    One instance is owned by the runtime and passed by reference to every
    engine. Nothing here is global.
    """

    company: Company = field(default_factory=Company)
    market: MarketState = field(default_factory=MarketState)
    stats: Stats = field(default_factory=Stats)
    clock: ClockState = field(default_factory=ClockState)
    available: list[Project] = field(default_factory=list)
    active: dict[str, Project] = field(default_factory=dict)
    archive: list[Project] = field(default_factory=list)
    developers: dict[str, Developer] = field(default_factory=dict)
    rng: RandomSource = field(default_factory=RandomSource)
    next_id: int = 1
    month_elapsed: float = 0.0
    settings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def initial(cls, config: SimulationConfig, seed: int | None = None) -> SimulationState:
        """Empty studio with the configured starting values."""
        econ = config.economy
        office = config.get_office(1)
        return cls(
            company=Company(
                name=econ.company_name,
                cash=econ.starting_cash,
                reputation=econ.starting_reputation,
                max_developers=office.max_developers if office else 4,
            ),
            market=MarketState(
                demand_multiplier=config.market.initial_demand,
                trending_category=config.market.initial_trending,
            ),
            clock=ClockState(speed=config.clock.default_speed),
            rng=RandomSource(seed),
        )

    @property
    def now(self) -> float:
        return self.clock.sim_time

    def issue_id(self, prefix: str) -> str:
        """Deterministic unique id; the counter is part of saved state."""
        value = f"{prefix}-{self.next_id}"
        self.next_id += 1
        return value

    # ── Lookups ──────────────────────────────────────────────────────

    def developer(self, id: str) -> Developer | None:
        return self.developers.get(id)

    def find_project(self, id: str) -> Project | None:
        if id in self.active:
            return self.active[id]
        for p in self.available:
            if p.id == id:
                return p
        for p in self.archive:
            if p.id == id:
                return p
        return None

    def available_project(self, id: str) -> Project | None:
        for p in self.available:
            if p.id == id:
                return p
        return None

    def free_developers(self) -> list[Developer]:
        return [
            d for _, d in sorted(self.developers.items())
            if d.assigned_project_id is None
        ]

    def iter_active(self) -> Iterator[Project]:
        """Active projects in id order, over a copy so callers may archive."""
        for pid in sorted(self.active):
            yield self.active[pid]

    def completed_projects(self) -> list[Project]:
        return [p for p in self.archive if p.status is ProjectStatus.COMPLETED]

    def failed_projects(self) -> list[Project]:
        return [p for p in self.archive if p.status is ProjectStatus.FAILED]

    # ── Transactions ─────────────────────────────────────────────────

    def snapshot(self) -> SimulationState:
        return copy.deepcopy(self)

    def restore_from(self, other: SimulationState) -> None:
        """Overwrite every field in place so live references stay valid."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))
