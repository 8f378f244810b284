"""Placement of freshly dumped thoughts on the dump screen.

Positions are percentages of the viewport. A candidate is rejected when it
lands inside the centre input card or the bottom "Done" button, or when it is
closer than ``MIN_DISTANCE`` to an existing item. After ``MAX_ATTEMPTS``
rejections we give up and return an unconstrained position with no rotation.

The planner never reasons about positions; they are attached to an item at
creation time and persisted with it.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Optional

from glassrubber.models.schemas import PositionSchema

MAX_ATTEMPTS = 100
MIN_DISTANCE = 12.0


@dataclass(frozen=True)
class Position:
    top: float
    left: float
    rotation: int = 0

    def distance_to(self, other: "Position") -> float:
        return math.hypot(self.top - other.top, self.left - other.left)

    def to_dict(self) -> dict:
        return {
            "top": f"{_fmt(self.top)}%",
            "left": f"{_fmt(self.left)}%",
            "rotation": self.rotation,
        }

    @classmethod
    def from_schema(cls, schema: PositionSchema) -> "Position":
        return cls(
            top=_parse_percent(schema.top),
            left=_parse_percent(schema.left),
            rotation=schema.rotation,
        )


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _parse_percent(value: str) -> float:
    return float(value.strip().rstrip("%"))


def in_center_box(top: float, left: float) -> bool:
    return 30 < top < 65 and 25 < left < 75


def in_bottom_button(top: float, left: float) -> bool:
    return top > 75 and 35 < left < 65


def _random_coord(rng: random.Random) -> int:
    # 10..89 inclusive
    return rng.randrange(80) + 10


def safe_position(
    existing: Iterable[Optional[Position]],
    rng: Optional[random.Random] = None,
) -> Position:
    """Return a placement that avoids reserved regions and crowded spots."""
    rng = rng or random.Random()
    placed = [p for p in existing if p is not None]

    for _ in range(MAX_ATTEMPTS):
        top = _random_coord(rng)
        left = _random_coord(rng)
        if in_center_box(top, left) or in_bottom_button(top, left):
            continue

        candidate = Position(top=top, left=left, rotation=rng.randrange(20) - 10)
        if any(candidate.distance_to(p) < MIN_DISTANCE for p in placed):
            continue
        return candidate

    return Position(top=_random_coord(rng), left=_random_coord(rng), rotation=0)
