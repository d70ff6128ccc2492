from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from devsim.engine import Engine, TickContext
from devsim.entities import EconomyHealth, MarketState, clamp
from devsim.events import MarketShifted, Notification, Severity

if TYPE_CHECKING:
    from devsim.catalog import MarketEventDef
    from devsim.config import MarketConfig, SimulationConfig
    from devsim.state import SimulationState

logger = logging.getLogger(__name__)


def classify(demand: float, config: MarketConfig) -> EconomyHealth:
    if demand < config.recession_below:
        return EconomyHealth.RECESSION
    if demand > config.booming_above:
        return EconomyHealth.BOOMING
    return EconomyHealth.STABLE


class MarketEngine(Engine):
    """Random walk of demand, trending category shifts and market events."""

    name = "market"

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config

    def tick(self, state: SimulationState, ctx: TickContext) -> None:
        cfg = self.config.market
        market = state.market
        rng = state.rng
        dt = ctx.dt
        before = (market.demand_multiplier, market.trending_category, market.economy_health)

        if rng.chance(cfg.demand_shift_rate * dt):
            half = cfg.demand_step / 2.0
            self._set_demand(market, market.demand_multiplier + rng.uniform(-half, half))

        if rng.chance(cfg.trend_shift_rate * dt):
            market.trending_category = rng.choice(self.config.project_type_ids)
            logger.debug("Trending category now %s", market.trending_category)

        if self.config.market_events and rng.chance(cfg.market_event_rate * dt):
            event = rng.choice(self.config.market_events)
            self.apply_event(state, event, ctx)

        market.economy_health = classify(market.demand_multiplier, cfg)
        after = (market.demand_multiplier, market.trending_category, market.economy_health)
        if after != before:
            ctx.bus.publish(MarketShifted(market_state=copy.deepcopy(market)))

    def apply_event(
        self, state: SimulationState, event: MarketEventDef, ctx: TickContext
    ) -> None:
        market = state.market
        if event.demand_delta:
            self._set_demand(market, market.demand_multiplier + event.demand_delta)
        if event.trending is not None:
            market.trending_category = event.trending
        logger.info("Market event: %s", event.id)
        ctx.bus.publish(Notification(event.message, Severity.INFO))

    def _set_demand(self, market: MarketState, value: float) -> None:
        cfg = self.config.market
        market.demand_multiplier = clamp(value, cfg.demand_min, cfg.demand_max)
