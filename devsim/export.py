from __future__ import annotations

import csv
import json
from pathlib import Path

from devsim.report import SimulationReport


def export_csv(report: SimulationReport, path: str | Path) -> None:
    """Export simulation data as CSV files.

    Creates three files:
      - {path}_company.csv
      - {path}_projects.csv
      - {path}_achievements.csv
    """
    base = str(path)

    with open(f"{base}_company.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "time", "cash", "reputation", "level", "developers",
            "active_projects", "demand_multiplier", "monthly_expenses",
        ])
        for s in report.snapshots:
            writer.writerow([
                s.time, s.cash, s.reputation, s.level, s.developers,
                s.active_projects, s.demand_multiplier, s.monthly_expenses,
            ])

    with open(f"{base}_projects.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "time", "project_id", "type", "status", "final_reward", "quality", "bugs",
        ])
        for p in report.projects:
            writer.writerow([
                p.time, p.project_id, p.project_type, p.status,
                p.final_reward, p.quality, p.bug_count,
            ])

    with open(f"{base}_achievements.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "achievement_id"])
        for a in report.achievements:
            writer.writerow([a.time, a.achievement_id])


def export_json(report: SimulationReport, path: str | Path) -> None:
    """Export full simulation report as JSON."""
    data = {
        "strategy": report.strategy_description,
        "terminal": report.terminal_description,
        "outcome": report.outcome,
        "seed": report.seed,
        "total_time": report.total_time,
        "total_ticks": report.total_ticks,
        "completed_projects": report.completed_projects,
        "failed_projects": report.failed_projects,
        "success_rate": report.success_rate,
        "total_revenue": report.total_revenue,
        "revenue_per_minute": report.revenue_per_minute,
        "final_cash": report.final_cash,
        "min_cash": report.min_cash,
        "time_in_debt": report.time_in_debt,
        "achievement_times": report.achievement_times,
        "projects": [
            {
                "time": p.time,
                "project_id": p.project_id,
                "type": p.project_type,
                "status": p.status,
                "final_reward": p.final_reward,
            }
            for p in report.projects
        ],
        "actions": [{"time": a.time, "action": a.action} for a in report.actions],
    }
    with open(str(path), "w") as f:
        json.dump(data, f, indent=2)
