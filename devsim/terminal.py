from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devsim._types import check_op, compare

if TYPE_CHECKING:
    from devsim.requirement import Requirement
    from devsim.view import StateView


@dataclass
class SimulationContext:
    """Extra context available to terminal conditions during simulation."""

    last_action_time: float = 0.0
    total_actions: int = 0
    aborted_ticks: int = 0


class TerminalCondition(ABC):
    """Base class for simulation stopping conditions."""

    @abstractmethod
    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...


class _TimeTerminal(TerminalCondition):
    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return view.sim_time >= self.seconds

    def describe(self) -> str:
        return f"time({self.seconds})"


class _TicksTerminal(TerminalCondition):
    def __init__(self, ticks: int) -> None:
        self.ticks = ticks

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return view.tick_index >= self.ticks

    def describe(self) -> str:
        return f"ticks({self.ticks})"


class _FieldTerminal(TerminalCondition):
    def __init__(self, field_name: str, op: str, threshold: float) -> None:
        self.field_name = field_name
        self.op = check_op(op)
        self.threshold = threshold

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return compare(getattr(view, self.field_name), self.op, self.threshold)

    def describe(self) -> str:
        return f'{self.field_name}("{self.op}", {self.threshold})'


class _AchievementTerminal(TerminalCondition):
    def __init__(self, achievement_id: str) -> None:
        self.achievement_id = achievement_id

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return self.achievement_id in view.achievements

    def describe(self) -> str:
        return f'achievement("{self.achievement_id}")'


class _RequirementTerminal(TerminalCondition):
    def __init__(self, requirement: Requirement, label: str) -> None:
        self.requirement = requirement
        self.label = label

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return self.requirement.evaluate(view)

    def describe(self) -> str:
        return self.label


class _AnyTerminal(TerminalCondition):
    def __init__(self, conditions: list[TerminalCondition]) -> None:
        self.conditions = conditions

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return any(c.is_met(view, context) for c in self.conditions)

    def describe(self) -> str:
        return " OR ".join(c.describe() for c in self.conditions)


class _AllTerminal(TerminalCondition):
    def __init__(self, conditions: list[TerminalCondition]) -> None:
        self.conditions = conditions

    def is_met(self, view: StateView, context: SimulationContext | None = None) -> bool:
        return all(c.is_met(view, context) for c in self.conditions)

    def describe(self) -> str:
        return " AND ".join(c.describe() for c in self.conditions)


class Terminal:
    """Factory for built-in terminal conditions."""

    @staticmethod
    def time(seconds: float) -> TerminalCondition:
        return _TimeTerminal(seconds)

    @staticmethod
    def ticks(count: int) -> TerminalCondition:
        return _TicksTerminal(count)

    @staticmethod
    def cash(op: str, threshold: float) -> TerminalCondition:
        return _FieldTerminal("cash", op, threshold)

    @staticmethod
    def completed_projects(op: str, threshold: int) -> TerminalCondition:
        return _FieldTerminal("completed_projects", op, threshold)

    @staticmethod
    def achievement(achievement_id: str) -> TerminalCondition:
        return _AchievementTerminal(achievement_id)

    @staticmethod
    def requirement(req: Requirement, label: str = "requirement") -> TerminalCondition:
        return _RequirementTerminal(req, label)

    @staticmethod
    def any(*conditions: TerminalCondition) -> TerminalCondition:
        return _AnyTerminal(list(conditions))

    @staticmethod
    def all(*conditions: TerminalCondition) -> TerminalCondition:
        return _AllTerminal(list(conditions))
