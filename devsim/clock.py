from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from devsim.errors import InvalidConfiguration

if TYPE_CHECKING:
    from devsim.config import ClockConfig
    from devsim.state import ClockState, SimulationState


@dataclass(frozen=True)
class SimTickEvent:
    """One discrete step handed from the clock to the tick orchestrator."""

    simulated_delta_seconds: float
    tick_index: int
    sim_time: float


class SimulationClock:
    """Maps wall-clock deltas to simulated time.

    Counters live on the owning state's ClockState so they are saved
    (and rolled back) with everything else; the clock itself only holds
    configuration.
    """

    def __init__(self, config: ClockConfig, owner: SimulationState) -> None:
        self.config = config
        self._owner = owner

    @property
    def state(self) -> ClockState:
        return self._owner.clock

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def tick_index(self) -> int:
        return self.state.tick_index

    @property
    def sim_time(self) -> float:
        return self.state.sim_time

    def set_speed(self, speed: float) -> None:
        if speed not in self.config.speed_multipliers:
            raise InvalidConfiguration(
                f"Speed {speed!r} not allowed. "
                f"Expected one of {list(self.config.speed_multipliers)}"
            )
        self.state.speed = speed

    def pause(self) -> None:
        self.state.paused = True

    def resume(self) -> None:
        self.state.paused = False

    def simulated_delta(self, real_delta_ms: float) -> float:
        return real_delta_ms / 1000.0 * self.state.speed

    def tick(self, real_delta_ms: float) -> SimTickEvent:
        """Advance counters by one tick of *real_delta_ms* wall-clock ms."""
        if real_delta_ms < 0:
            raise InvalidConfiguration(
                f"real_delta_ms must be non-negative, got {real_delta_ms!r}"
            )
        delta = self.simulated_delta(real_delta_ms)
        self.state.tick_index += 1
        self.state.sim_time += delta
        return SimTickEvent(
            simulated_delta_seconds=delta,
            tick_index=self.state.tick_index,
            sim_time=self.state.sim_time,
        )
