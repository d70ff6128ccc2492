from __future__ import annotations

from devsim.report import SimulationReport


def format_text_report(report: SimulationReport) -> str:
    """Format a simulation report for console output."""
    lines: list[str] = []

    lines.append("=" * 40 + " DevSim Simulation Report " + "=" * 40)
    lines.append(f"Strategy: {report.strategy_description}")
    lines.append(f"Terminal: {report.terminal_description}")
    lines.append(
        f"Result: {report.outcome} at {report.total_time:.1f}s "
        f"({report.total_ticks} ticks)"
    )
    if report.seed is not None:
        lines.append(f"Seed: {report.seed}")
    lines.append("")

    lines.append("PROJECTS:")
    lines.append(f"  Completed: {report.completed_projects}")
    lines.append(f"  Failed: {report.failed_projects}")
    lines.append(f"  Success rate: {report.success_rate * 100:.0f}%")
    lines.append(f"  Mean quality: {report.mean_quality:.1f}")
    lines.append(f"  Mean bugs: {report.mean_bugs:.2f}")
    lines.append("")

    lines.append("ECONOMY:")
    lines.append(f"  Revenue: ${report.total_revenue:,.0f}")
    lines.append(f"  Revenue rate: ${report.revenue_per_minute:,.0f}/min")
    lines.append(f"  Final cash: ${report.final_cash:,.0f}")
    lines.append(f"  Lowest cash: ${report.min_cash:,.0f}")
    if report.time_in_debt > 0:
        lines.append(f"  Time in debt: {report.time_in_debt:.1f}s")
    lines.append("")

    if report.achievements:
        lines.append("ACHIEVEMENTS:")
        for a in report.achievements:
            lines.append(f"  * {a.achievement_id:.<30s} {a.time:.1f}s")
        lines.append("")

    if report.levels:
        lines.append("COMPANY LEVELS:")
        for lv in report.levels:
            lines.append(f"  * level {lv.level:<3d} {lv.time:.1f}s")
        lines.append("")

    lines.append(f"ACTIONS: {len(report.actions)}")
    return "\n".join(lines)
