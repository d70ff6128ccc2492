from __future__ import annotations


class DevSimError(Exception):
    """Base class for all simulation errors."""


class InvalidConfiguration(DevSimError, ValueError):
    """A speed or tunable value was rejected before touching state."""


class InsufficientFunds(DevSimError):
    """An action needs more cash than the company holds."""

    def __init__(self, message: str, cost: float = 0.0, cash: float = 0.0) -> None:
        super().__init__(message)
        self.cost = cost
        self.cash = cash


class CapacityExceeded(DevSimError):
    """Office or team capacity would be exceeded."""


class RequirementNotMet(DevSimError):
    """An action's precondition (level, status, ownership) does not hold."""


class UnknownEntity(DevSimError, KeyError):
    """A project, developer, technology or office id does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class DecodeError(DevSimError):
    """A save blob is malformed."""


class VersionMismatch(DecodeError):
    """A save blob has an incompatible top-level version."""

    def __init__(self, found: object, supported: object) -> None:
        super().__init__(
            f"Unsupported save version {found!r}; supported: {supported!r}"
        )
        self.found = found
        self.supported = supported


class TickAborted(DevSimError):
    """A tick raised and was rolled back."""

    def __init__(self, tick_index: int, cause: BaseException) -> None:
        super().__init__(f"Tick {tick_index} aborted: {cause!r}")
        self.tick_index = tick_index
        self.cause = cause
