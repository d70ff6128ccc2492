from __future__ import annotations

import random
from typing import Any, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """Seedable random stream shared by every stochastic part of the simulation.

    Two sources created from the same seed and asked the same questions in
    the same order produce the same answers. The internal state can be
    exported to plain JSON types and restored, so a loaded save continues
    the exact stream it was saved with.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        return self._rng.randint(low, high)

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def chance(self, probability: float) -> bool:
        """True with the given probability. Values above 1 always hit."""
        if probability <= 0.0:
            return False
        return self._rng.random() < probability

    # ── State export ─────────────────────────────────────────────────

    def get_state(self) -> list[Any]:
        version, internal, gauss_next = self._rng.getstate()
        return [version, list(internal), gauss_next]

    def set_state(self, data: Sequence[Any]) -> None:
        version, internal, gauss_next = data
        self._rng.setstate((version, tuple(internal), gauss_next))

    @classmethod
    def from_state(cls, data: Sequence[Any], seed: int | None = None) -> RandomSource:
        source = cls(seed)
        source.set_state(data)
        return source

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RandomSource):
            return NotImplemented
        return self._rng.getstate() == other._rng.getstate()

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed!r})"
