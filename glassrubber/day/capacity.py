"""Energy-bounded capacity for glass items.

Everything here is derived: active/postponed status is recomputed from the
current glass rank every time and is never stored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from glassrubber.config import DEFAULT_GLASS_WARNING_THRESHOLD
from glassrubber.models.schemas import Energy

from .items import Item, Items, glass_items

GLASS_LIMITS: Dict[Energy, int] = {
    Energy.LOW: 1,
    Energy.MEDIUM: 3,
    Energy.HIGH: 5,
}


def glass_limit(energy: Optional[Energy]) -> Union[int, float]:
    """Maximum number of active glass items; unbounded when energy is unset."""
    if energy is None:
        return math.inf
    return GLASS_LIMITS[Energy(energy)]


def is_active(rank: int, energy: Optional[Energy]) -> bool:
    return rank < glass_limit(energy)


@dataclass(frozen=True)
class GlassSlot:
    item: Item
    rank: int
    active: bool

    @property
    def postponed(self) -> bool:
        return not self.active


def glass_slots(items: Items, energy: Optional[Energy]) -> List[GlassSlot]:
    return [
        GlassSlot(item=item, rank=rank, active=is_active(rank, energy))
        for rank, item in enumerate(glass_items(items))
    ]


def active_glass(items: Items, energy: Optional[Energy]) -> List[Item]:
    return [s.item for s in glass_slots(items, energy) if s.active]


def postponed_glass(items: Items, energy: Optional[Energy]) -> List[Item]:
    return [s.item for s in glass_slots(items, energy) if s.postponed]


def too_much_glass(
    items: Items, threshold: int = DEFAULT_GLASS_WARNING_THRESHOLD
) -> bool:
    """Soft warning only; never blocks a transition."""
    return len(glass_items(items)) > threshold
