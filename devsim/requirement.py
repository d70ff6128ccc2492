from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from devsim._types import check_op, compare

if TYPE_CHECKING:
    from devsim.view import StateView


class Requirement(ABC):
    """Base class for all requirements: read-only predicates on a StateView."""

    @abstractmethod
    def evaluate(self, view: StateView) -> bool: ...

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])


# ── Private implementations ──────────────────────────────────────────


class _FieldRequirement(Requirement):
    def __init__(self, field_name: str, op: str, threshold: float) -> None:
        self.field_name = field_name
        self.op = check_op(op)
        self.threshold = threshold

    def evaluate(self, view: StateView) -> bool:
        return compare(getattr(view, self.field_name), self.op, self.threshold)


class _TechnologyRequirement(Requirement):
    def __init__(self, technology_id: str) -> None:
        self.technology_id = technology_id

    def evaluate(self, view: StateView) -> bool:
        return self.technology_id in view.technologies


class _AllTechnologiesRequirement(Requirement):
    def evaluate(self, view: StateView) -> bool:
        return bool(view.technology_catalog) and view.technology_catalog <= view.technologies


class _AchievementRequirement(Requirement):
    def __init__(self, achievement_id: str) -> None:
        self.achievement_id = achievement_id

    def evaluate(self, view: StateView) -> bool:
        return self.achievement_id in view.achievements


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, view: StateView) -> bool:
        return all(r.evaluate(view) for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, view: StateView) -> bool:
        return any(r.evaluate(view) for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Callable[[StateView], bool]) -> None:
        self.fn = fn

    def evaluate(self, view: StateView) -> bool:
        return self.fn(view)


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in requirement types."""

    @staticmethod
    def cash(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("cash", op, threshold)

    @staticmethod
    def reputation(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("reputation", op, threshold)

    @staticmethod
    def company_level(op: str, threshold: int) -> Requirement:
        return _FieldRequirement("company_level", op, threshold)

    @staticmethod
    def completed_projects(op: str, threshold: int) -> Requirement:
        return _FieldRequirement("completed_projects", op, threshold)

    @staticmethod
    def failed_projects(op: str, threshold: int) -> Requirement:
        return _FieldRequirement("failed_projects", op, threshold)

    @staticmethod
    def perfect_projects(op: str, threshold: int) -> Requirement:
        return _FieldRequirement("perfect_projects", op, threshold)

    @staticmethod
    def bug_free_projects(op: str, threshold: int) -> Requirement:
        return _FieldRequirement("bug_free_projects", op, threshold)

    @staticmethod
    def team_size(op: str, threshold: int) -> Requirement:
        return _FieldRequirement("team_size", op, threshold)

    @staticmethod
    def total_revenue(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("total_revenue", op, threshold)

    @staticmethod
    def time(op: str, seconds: float) -> Requirement:
        return _FieldRequirement("sim_time", op, seconds)

    @staticmethod
    def field(name: str, op: str, threshold: float) -> Requirement:
        """Compare any numeric StateView attribute."""
        return _FieldRequirement(name, op, threshold)

    @staticmethod
    def technology(technology_id: str) -> Requirement:
        return _TechnologyRequirement(technology_id)

    @staticmethod
    def all_technologies() -> Requirement:
        return _AllTechnologiesRequirement()

    @staticmethod
    def achievement(achievement_id: str) -> Requirement:
        return _AchievementRequirement(achievement_id)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(fn: Callable[[StateView], bool]) -> Requirement:
        return _CustomRequirement(fn)
