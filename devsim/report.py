from __future__ import annotations

from dataclasses import dataclass, field

from devsim.metrics import (
    AchievementEvent,
    ActionEvent,
    CompanySnapshot,
    LevelEvent,
    MetricsCollector,
    ProjectOutcome,
)


@dataclass
class SimulationReport:
    """Container for simulation results and derived metrics."""

    strategy_description: str = ""
    terminal_description: str = ""
    outcome: str = ""
    total_time: float = 0.0
    total_ticks: int = 0
    seed: int | None = None

    # Raw metrics
    snapshots: list[CompanySnapshot] = field(default_factory=list)
    projects: list[ProjectOutcome] = field(default_factory=list)
    actions: list[ActionEvent] = field(default_factory=list)
    achievements: list[AchievementEvent] = field(default_factory=list)
    levels: list[LevelEvent] = field(default_factory=list)

    # Derived metrics
    completed_projects: int = 0
    failed_projects: int = 0
    success_rate: float = 0.0
    total_revenue: float = 0.0
    revenue_per_minute: float = 0.0
    mean_quality: float = 0.0
    mean_bugs: float = 0.0
    final_cash: float = 0.0
    min_cash: float = 0.0
    time_in_debt: float = 0.0
    achievement_times: dict[str, float] = field(default_factory=dict)

    def achievement_time(self, achievement_id: str) -> float | None:
        return self.achievement_times.get(achievement_id)

    def cash_series(self) -> list[tuple[float, float]]:
        return [(s.time, s.cash) for s in self.snapshots]

    def reputation_series(self) -> list[tuple[float, float]]:
        return [(s.time, float(s.reputation)) for s in self.snapshots]

    def demand_series(self) -> list[tuple[float, float]]:
        return [(s.time, s.demand_multiplier) for s in self.snapshots]


def build_report(
    collector: MetricsCollector,
    strategy_description: str,
    terminal_description: str,
    outcome: str,
    total_time: float,
    total_ticks: int = 0,
    seed: int | None = None,
) -> SimulationReport:
    """Build a SimulationReport from collected metrics."""
    completed = [p for p in collector.projects if p.status == "completed"]
    failed = [p for p in collector.projects if p.status == "failed"]
    closed = len(completed) + len(failed)

    revenue = sum(p.final_reward for p in completed)
    rpm = (revenue / total_time * 60.0) if total_time > 0 else 0.0
    mean_quality = sum(p.quality for p in completed) / len(completed) if completed else 0.0
    mean_bugs = sum(p.bug_count for p in completed) / len(completed) if completed else 0.0

    # Time in debt: sum of snapshot intervals that started below zero
    snaps = collector.snapshots
    in_debt = 0.0
    for prev, cur in zip(snaps, snaps[1:]):
        if prev.cash < 0:
            in_debt += cur.time - prev.time

    return SimulationReport(
        strategy_description=strategy_description,
        terminal_description=terminal_description,
        outcome=outcome,
        total_time=total_time,
        total_ticks=total_ticks,
        seed=seed,
        snapshots=snaps,
        projects=collector.projects,
        actions=collector.actions,
        achievements=collector.achievements,
        levels=collector.levels,
        completed_projects=len(completed),
        failed_projects=len(failed),
        success_rate=len(completed) / closed if closed else 0.0,
        total_revenue=revenue,
        revenue_per_minute=rpm,
        mean_quality=mean_quality,
        mean_bugs=mean_bugs,
        final_cash=snaps[-1].cash if snaps else 0.0,
        min_cash=min((s.cash for s in snaps), default=0.0),
        time_in_debt=in_debt,
        achievement_times={a.achievement_id: a.time for a in collector.achievements},
    )
