from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devsim.engine import Engine, TickContext
from devsim.events import Notification, Severity

if TYPE_CHECKING:
    from devsim.config import SimulationConfig
    from devsim.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseBreakdown:
    salaries: float
    office: float
    maintenance: float

    @property
    def total(self) -> float:
        return self.salaries + self.office + self.maintenance


class EconomyLedger(Engine):
    """Recomputes recurring costs each tick and bills them once per month.

    Months are measured in simulated seconds, so the cadence follows the
    game speed. Cash has no floor.
    """

    name = "economy"

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config

    def breakdown(self, state: SimulationState) -> ExpenseBreakdown:
        econ = self.config.economy
        company = state.company
        return ExpenseBreakdown(
            salaries=float(sum(d.salary for _, d in sorted(state.developers.items()))),
            office=company.office_level * econ.office_rent_unit,
            maintenance=len(company.unlocked_technologies) * econ.maintenance_unit,
        )

    def monthly_expenses(self, state: SimulationState) -> float:
        return self.breakdown(state).total

    def tick(self, state: SimulationState, ctx: TickContext) -> None:
        company = state.company
        company.monthly_expenses = self.monthly_expenses(state)

        state.month_elapsed += ctx.dt
        period = self.config.economy.seconds_per_month
        while state.month_elapsed >= period:
            state.month_elapsed -= period
            self.bill_month(state, ctx)

    def bill_month(self, state: SimulationState, ctx: TickContext) -> None:
        company = state.company
        was_solvent = company.cash >= 0
        expenses = company.monthly_expenses
        company.cash -= expenses
        state.stats.total_expenses_paid += expenses
        state.stats.months_elapsed += 1
        logger.debug(
            "Month %d billed: %.0f (cash now %.0f)",
            state.stats.months_elapsed, expenses, company.cash,
        )
        if was_solvent and company.cash < 0:
            logger.warning("Company cash went negative: %.0f", company.cash)
            ctx.bus.publish(
                Notification(
                    f"Cash is negative (${company.cash:,.0f}). Complete projects to recover!",
                    Severity.WARNING,
                )
            )
