"""Typed publish/subscribe channel between the simulation and its observers."""

from __future__ import annotations

import logging
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Iterator

if TYPE_CHECKING:
    from devsim.achievement import AchievementDef
    from devsim.entities import Developer, MarketState, Project

logger = logging.getLogger(__name__)


class Severity(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Event:
    """Base class for everything published on the bus."""

    topic: ClassVar[str] = "Event"


@dataclass(frozen=True)
class EnergyChanged(Event):
    topic: ClassVar[str] = "EnergyChanged"

    value: float


@dataclass(frozen=True)
class ResourceChanged(Event):
    topic: ClassVar[str] = "ResourceChanged"

    kind: str
    value: float
    delta: float = 0.0


@dataclass(frozen=True)
class ProjectStarted(Event):
    topic: ClassVar[str] = "ProjectStarted"

    project: Project


@dataclass(frozen=True)
class ProjectCompleted(Event):
    topic: ClassVar[str] = "ProjectCompleted"

    project: Project
    final_reward: float


@dataclass(frozen=True)
class ProjectFailed(Event):
    topic: ClassVar[str] = "ProjectFailed"

    project: Project


@dataclass(frozen=True)
class DeveloperHired(Event):
    topic: ClassVar[str] = "DeveloperHired"

    developer: Developer


@dataclass(frozen=True)
class DeveloperLeveledUp(Event):
    topic: ClassVar[str] = "DeveloperLeveledUp"

    developer: Developer
    new_level: int


@dataclass(frozen=True)
class AchievementUnlocked(Event):
    topic: ClassVar[str] = "AchievementUnlocked"

    achievement: AchievementDef


@dataclass(frozen=True)
class MarketShifted(Event):
    topic: ClassVar[str] = "MarketShifted"

    market_state: MarketState


@dataclass(frozen=True)
class CompanyLeveledUp(Event):
    topic: ClassVar[str] = "CompanyLeveledUp"

    new_level: int


@dataclass(frozen=True)
class Notification(Event):
    """User-facing message. The presentation layer expires it after ttl_seconds."""

    topic: ClassVar[str] = "Notification"

    text: str
    severity: Severity = Severity.INFO
    ttl_seconds: float = 5.0


EVENT_TYPES: dict[str, type[Event]] = {
    cls.topic: cls
    for cls in (
        EnergyChanged,
        ResourceChanged,
        ProjectStarted,
        ProjectCompleted,
        ProjectFailed,
        DeveloperHired,
        DeveloperLeveledUp,
        AchievementUnlocked,
        MarketShifted,
        CompanyLeveledUp,
        Notification,
    )
}

Handler = Callable[[Any], None]


def _topic_of(event_type: type[Event] | str) -> str:
    if isinstance(event_type, str):
        if event_type not in EVENT_TYPES:
            raise ValueError(
                f"Unknown topic: {event_type!r}. Expected one of {sorted(EVENT_TYPES)}"
            )
        return event_type
    return event_type.topic


class EventBus:
    """Synchronous publish/subscribe channel.

    Handlers subscribe to an event class (or its topic name) or to every
    event with subscribe_all(). While a buffer() block is open, published
    events are queued and only delivered when the block exits cleanly.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._wildcard: list[Handler] = []
        self._pending: list[Event] | None = None

    # ── Subscription ─────────────────────────────────────────────────

    def subscribe(
        self, event_type: type[Event] | str, handler: Handler
    ) -> Callable[[], None]:
        """Register *handler*; returns a callable that unsubscribes it."""
        topic = _topic_of(event_type)
        self._handlers[topic].append(handler)
        return lambda: self.unsubscribe(topic, handler)

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        self._wildcard.append(handler)

        def _off() -> None:
            if handler in self._wildcard:
                self._wildcard.remove(handler)

        return _off

    def unsubscribe(self, event_type: type[Event] | str, handler: Handler) -> None:
        handlers = self._handlers.get(_topic_of(event_type), [])
        if handler in handlers:
            handlers.remove(handler)

    def clear(self) -> None:
        self._handlers.clear()
        self._wildcard.clear()

    # ── Publishing ───────────────────────────────────────────────────

    def publish(self, event: Event) -> None:
        if self._pending is not None:
            self._pending.append(event)
            return
        self._dispatch(event)

    @contextmanager
    def buffer(self) -> Iterator[list[Event]]:
        """Queue events for the duration of the block.

        Queued events are delivered in order when the block exits normally
        and discarded if it raises. Nested blocks share the outer queue.
        """
        if self._pending is not None:
            yield self._pending
            return

        self._pending = []
        try:
            yield self._pending
        except BaseException:
            dropped = len(self._pending)
            self._pending = None
            if dropped:
                logger.debug("Discarded %d buffered event(s)", dropped)
            raise
        pending, self._pending = self._pending, None
        for event in pending:
            self._dispatch(event)

    def _dispatch(self, event: Event) -> None:
        for handler in list(self._handlers.get(event.topic, ())):
            handler(event)
        for handler in list(self._wildcard):
            handler(event)
