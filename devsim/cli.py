from __future__ import annotations

import argparse
import logging
import sys

from devsim import codec
from devsim.config import SimulationConfig, default_config, load_config
from devsim.errors import DecodeError, DevSimError
from devsim.formatting import format_text_report
from devsim.runtime import SimulationRuntime
from devsim.simulation import Simulation
from devsim.strategy import GreedyContractor, Idle, Strategy
from devsim.terminal import Terminal, TerminalCondition


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devsim",
        description="DevSim Tycoon headless simulation CLI",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a simulation")
    sim.add_argument(
        "--config",
        default=None,
        help="Python module with define_config() (default: built-in tuning)",
    )
    sim.add_argument(
        "--strategy",
        default="greedy",
        choices=["greedy", "idle"],
        help="Strategy to use (default: greedy)",
    )
    sim.add_argument(
        "--cash-reserve", type=float, default=10_000.0,
        help="Cash the greedy strategy keeps in hand",
    )
    sim.add_argument("--seed", type=int, default=None, help="Random seed")
    sim.add_argument("--speed", type=float, default=None, help="Game speed multiplier")
    sim.add_argument(
        "--time", type=float, default=3600, help="Max simulated time (s)"
    )
    sim.add_argument("--ticks", type=int, default=None, help="Max tick count")
    sim.add_argument(
        "--decision-interval", type=float, default=1.0,
        help="Simulated seconds between strategy decisions",
    )
    sim.add_argument("--load", default=None, help="Start from this save file")
    sim.add_argument("--save", default=None, help="Write the final state to this path")
    sim.add_argument("--export-csv", default=None, help="CSV export path prefix")
    sim.add_argument("--export-json", default=None, help="JSON export path")
    sim.add_argument("--plot", default=None, help="Plot output path (PNG)")
    sim.add_argument(
        "--monte-carlo",
        type=int,
        default=None,
        help="Number of Monte Carlo runs",
    )

    insp = sub.add_parser("inspect", help="Summarize a save file")
    insp.add_argument("save_path", help="Path to a JSON save")

    return parser


def _load_config_or_exit(module_path: str | None) -> SimulationConfig:
    if module_path is None:
        return default_config()
    try:
        return load_config(module_path)
    except DevSimError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


def build_strategy(name: str, cash_reserve: float = 10_000.0) -> Strategy:
    if name == "idle":
        return Idle()
    return GreedyContractor(cash_reserve=cash_reserve)


def build_terminal(args: argparse.Namespace) -> TerminalCondition:
    if args.ticks is not None:
        return Terminal.any(Terminal.ticks(args.ticks), Terminal.time(args.time))
    return Terminal.time(args.time)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "inspect":
        _inspect(args.save_path)
        return

    if args.command == "simulate":
        config = _load_config_or_exit(args.config)
        terminal = build_terminal(args)

        if args.monte_carlo and args.monte_carlo > 1:
            _run_monte_carlo(config, terminal, args)
            return

        runtime = None
        if args.load:
            try:
                runtime = SimulationRuntime(config=config, state=codec.read_save(args.load))
            except (OSError, DevSimError) as exc:
                print(f"Error: cannot load {args.load}: {exc}")
                sys.exit(1)

        sim = Simulation(
            strategy=build_strategy(args.strategy, args.cash_reserve),
            terminal=terminal,
            config=config,
            seed=args.seed,
            speed=args.speed,
            decision_interval=args.decision_interval,
            runtime=runtime,
        )
        report = sim.run()
        print(format_text_report(report))

        if args.save:
            codec.write_save(args.save, sim.runtime.state)
            print(f"\nState saved to {args.save}")

        if args.export_csv:
            from devsim.export import export_csv
            export_csv(report, args.export_csv)
            print(f"\nCSV exported to {args.export_csv}_*.csv")

        if args.export_json:
            from devsim.export import export_json
            export_json(report, args.export_json)
            print(f"\nJSON exported to {args.export_json}")

        if args.plot:
            from devsim.visualization import plot_simulation
            plot_simulation(report, args.plot)
            print(f"\nPlot saved to {args.plot}")


def _inspect(path: str) -> None:
    try:
        state = codec.read_save(path)
    except (OSError, DecodeError) as exc:
        print(f"Error: cannot load {path}: {exc}")
        sys.exit(1)

    company = state.company
    print(f"{company.name} (level {company.level}, office {company.office_level})")
    print(f"  Time: {state.now:.1f}s over {state.clock.tick_index} ticks")
    print(f"  Cash: ${company.cash:,.0f}  Reputation: {company.reputation}")
    print(f"  Developers: {len(state.developers)}/{company.max_developers}")
    print(
        f"  Projects: {len(state.available)} available, {len(state.active)} active, "
        f"{company.completed_project_count} completed, {company.failed_project_count} failed"
    )
    print(f"  Technologies: {', '.join(sorted(company.unlocked_technologies)) or '-'}")
    print(f"  Achievements: {', '.join(sorted(company.unlocked_achievements)) or '-'}")
    print(
        f"  Market: demand x{state.market.demand_multiplier:.2f}, "
        f"trending {state.market.trending_category}, {state.market.economy_health.value}"
    )


def _run_monte_carlo(
    config: SimulationConfig,
    terminal: TerminalCondition,
    args: argparse.Namespace,
) -> None:
    """Run multiple simulations and report aggregate results."""
    n = args.monte_carlo
    achievement_times: dict[str, list[float]] = {}
    revenues: list[float] = []
    final_cash: list[float] = []
    went_negative = 0

    for i in range(n):
        sim = Simulation(
            strategy=build_strategy(args.strategy, args.cash_reserve),
            terminal=terminal,
            config=config,
            seed=(args.seed + i) if args.seed is not None else None,
            speed=args.speed,
            decision_interval=args.decision_interval,
        )
        report = sim.run()
        revenues.append(report.total_revenue)
        final_cash.append(report.final_cash)
        if report.min_cash < 0:
            went_negative += 1
        for aid, t in report.achievement_times.items():
            achievement_times.setdefault(aid, []).append(t)

    print(f"Monte Carlo: {n} runs")
    print(f"Revenue: mean=${sum(revenues)/n:,.0f}, "
          f"min=${min(revenues):,.0f}, max=${max(revenues):,.0f}")
    print(f"Final cash: mean=${sum(final_cash)/n:,.0f}")
    print(f"Runs in debt: {went_negative}/{n}")
    if achievement_times:
        print("Achievement times (mean / min / max):")
        for aid, times in sorted(achievement_times.items()):
            mean = sum(times) / len(times)
            print(f"  {aid}: {mean:.1f}s / {min(times):.1f}s / {max(times):.1f}s")
