"""The persisted day record and calendar-day keys."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Callable

from glassrubber.models.schemas import DayRecordSchema, DayState

from .items import Item, Items

# Fixed English names so the key does not depend on the process locale.
_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def day_key(day: dt.date) -> str:
    """Calendar-day identifier, e.g. ``"Sat Oct 17 2026"``.

    Compared for equality only, never ordered.
    """
    return (
        f"{_DAY_NAMES[day.weekday()]} {_MONTH_NAMES[day.month - 1]} "
        f"{day.day:02d} {day.year}"
    )


def today_key() -> str:
    return day_key(dt.date.today())


DayClock = Callable[[], str]


@dataclass(frozen=True)
class DayRecord:
    date: str
    items: Items = field(default_factory=tuple)
    state: DayState = DayState.LOCKED

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "state": self.state.value,
            "data": [i.to_dict() for i in self.items],
        }

    @classmethod
    def from_schema(cls, schema: DayRecordSchema) -> "DayRecord":
        return cls(
            date=schema.date,
            items=tuple(Item.from_schema(s) for s in schema.data),
            state=schema.state,
        )
