from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from devsim.catalog import TechnologyDef


class BonusKind(Enum):
    PRODUCTIVITY = auto()
    QUALITY = auto()
    BUG_RATE = auto()
    SCALABILITY = auto()


def combined_multiplier(
    owned: Iterable[str],
    technologies: dict[str, TechnologyDef],
    kind: BonusKind,
) -> float:
    """Product of every owned technology's multiplier for *kind*.

    Unknown technology ids contribute nothing. Ids are visited in sorted
    order so the float product does not depend on set iteration order.
    """
    mult = 1.0
    for tech_id in sorted(owned):
        tech = technologies.get(tech_id)
        if tech is None:
            continue
        mult *= tech.bonuses.get(kind, 1.0)
    return mult
