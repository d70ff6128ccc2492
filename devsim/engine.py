from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devsim.clock import SimTickEvent
    from devsim.entities import Project
    from devsim.events import EventBus
    from devsim.state import SimulationState


@dataclass
class TickContext:
    """Everything an engine needs besides the state itself.

    assignments maps each developer id to the project it was working on
    when the tick started, before any engine released it.
    """

    event: SimTickEvent
    bus: EventBus
    assignments: dict[str, Project] = field(default_factory=dict)

    @property
    def dt(self) -> float:
        return self.event.simulated_delta_seconds

    @property
    def now(self) -> float:
        return self.event.sim_time


class Engine(ABC):
    """One phase of the tick. Engines mutate the state in place."""

    name: str = "engine"

    @abstractmethod
    def tick(self, state: SimulationState, ctx: TickContext) -> None: ...
