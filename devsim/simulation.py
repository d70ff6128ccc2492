from __future__ import annotations

import logging
import math

from devsim.config import SimulationConfig
from devsim.errors import TickAborted
from devsim.metrics import MetricsCollector
from devsim.report import SimulationReport, build_report
from devsim.runtime import SimulationRuntime
from devsim.strategy import Strategy
from devsim.terminal import SimulationContext, TerminalCondition
from devsim.view import StateView

logger = logging.getLogger(__name__)

MAX_TICKS = 10_000_000


class Simulation:
    """Orchestrates a headless run of the simulation under a strategy.

    The strategy is consulted every *decision_interval* simulated seconds;
    between decisions the runtime ticks at its configured interval.
    """

    def __init__(
        self,
        strategy: Strategy,
        terminal: TerminalCondition,
        config: SimulationConfig | None = None,
        seed: int | None = None,
        speed: float | None = None,
        decision_interval: float = 1.0,
        snapshot_interval: float = 1.0,
        runtime: SimulationRuntime | None = None,
    ) -> None:
        self.strategy = strategy
        self.terminal = terminal
        self.seed = seed
        self.decision_interval = decision_interval

        self.runtime = runtime or SimulationRuntime(config=config, seed=seed)
        if speed is not None:
            self.runtime.set_speed(speed)
        self.collector = MetricsCollector(snapshot_interval=snapshot_interval)
        self.collector.attach(self.runtime.bus, lambda: self.runtime.state.now)
        self.context = SimulationContext()

    def _view(self) -> StateView:
        return self.runtime.view()

    def run(self) -> SimulationReport:
        runtime = self.runtime
        state = runtime.state
        next_decision = state.now
        tick_count = 0

        try:
            while not self.terminal.is_met(self._view(), self.context):
                if state.now >= next_decision:
                    for action in self.strategy.decide(runtime):
                        self.collector.record_action(state.now, action)
                        self.context.total_actions += 1
                        self.context.last_action_time = state.now
                    next_decision = state.now + self.decision_interval

                tick_count += 1
                if tick_count > MAX_TICKS:
                    break

                try:
                    if runtime.advance() is None:
                        return self._build_report("Paused", tick_count - 1)
                except TickAborted:
                    self.context.aborted_ticks += 1
                    return self._build_report("Aborted: tick failed", tick_count - 1)

                self.collector.record_tick(state)

                if math.isnan(state.company.cash) or math.isinf(state.company.cash):
                    return self._build_report("Aborted: NaN/Inf detected", tick_count)

            outcome = (
                "Terminal condition met"
                if self.terminal.is_met(self._view(), self.context)
                else "Max ticks reached"
            )
            return self._build_report(outcome, tick_count)
        finally:
            self.collector.detach()

    def _build_report(self, outcome: str, ticks: int) -> SimulationReport:
        logger.info("Simulation finished: %s after %d ticks", outcome, ticks)
        # Final sample so short runs still have an end point
        self.collector.take_snapshot(self.runtime.state)
        return build_report(
            collector=self.collector,
            strategy_description=self.strategy.describe(),
            terminal_description=self.terminal.describe(),
            outcome=outcome,
            total_time=self.runtime.state.now,
            total_ticks=ticks,
            seed=self.seed,
        )
