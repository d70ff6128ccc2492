from __future__ import annotations

from devsim.report import SimulationReport


def plot_simulation(
    report: SimulationReport,
    output_path: str | None = None,
) -> None:
    """Generate a 4-panel matplotlib visualization of simulation results.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install devsim[viz]"
        )

    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(f"DevSim Simulation: {report.strategy_description}", fontsize=14)

    # 1. Cash over time
    ax1 = axes[0][0]
    series = report.cash_series()
    if series:
        times, values = zip(*series)
        ax1.plot(times, values, label="cash")
        ax1.axhline(0, color="red", linewidth=0.8)
    ax1.set_xlabel("Time (s)")
    ax1.set_ylabel("Cash")
    ax1.set_title("Cash")
    ax1.grid(True, alpha=0.3)

    # 2. Reputation and market demand
    ax2 = axes[0][1]
    rep = report.reputation_series()
    if rep:
        times, values = zip(*rep)
        ax2.plot(times, values, label="reputation")
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Reputation")
    ax2.set_title("Reputation and Demand")
    demand = report.demand_series()
    if demand:
        ax2b = ax2.twinx()
        times, values = zip(*demand)
        ax2b.plot(times, values, color="orange", alpha=0.7, label="demand")
        ax2b.set_ylabel("Demand multiplier")
    ax2.grid(True, alpha=0.3)

    # 3. Project outcomes
    ax3 = axes[1][0]
    if report.projects:
        done = [p for p in report.projects if p.status == "completed"]
        failed = [p for p in report.projects if p.status == "failed"]
        ax3.scatter(
            [p.time for p in done], [p.final_reward for p in done],
            s=14, alpha=0.7, label="completed",
        )
        ax3.scatter(
            [p.time for p in failed], [0.0] * len(failed),
            s=14, marker="x", color="red", label="failed",
        )
        ax3.set_xlabel("Time (s)")
        ax3.set_ylabel("Final reward")
        ax3.set_title("Project Outcomes")
        ax3.legend(fontsize=8)
        ax3.grid(True, alpha=0.3)

    # 4. Quality distribution
    ax4 = axes[1][1]
    qualities = [p.quality for p in report.projects if p.status == "completed"]
    if qualities:
        ax4.hist(qualities, bins=min(20, len(qualities)), alpha=0.7)
        ax4.axvline(
            report.mean_quality,
            color="red",
            linestyle="--",
            label=f"Mean: {report.mean_quality:.1f}",
        )
        ax4.set_xlabel("Quality")
        ax4.set_ylabel("Count")
        ax4.set_title("Delivered Quality")
        ax4.legend()
        ax4.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
    else:
        plt.show()
