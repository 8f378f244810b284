"""Day planning core: items, capacity, recency and the day state machine."""
from .capacity import GlassSlot, glass_limit, glass_slots, too_much_glass
from .ids import CounterIdGenerator, random_id
from .items import Item, Items
from .layout import Position, safe_position
from .recency import RECENTS_CAP, RecencyTracker, merge_recents, visible_recents
from .record import DayRecord, day_key, today_key
from .state_machine import DayStateMachine, Step, Trigger
from .views import locked_checklist

__all__ = [
    "GlassSlot",
    "glass_limit",
    "glass_slots",
    "too_much_glass",
    "CounterIdGenerator",
    "random_id",
    "Item",
    "Items",
    "Position",
    "safe_position",
    "RECENTS_CAP",
    "RecencyTracker",
    "merge_recents",
    "visible_recents",
    "DayRecord",
    "day_key",
    "today_key",
    "DayStateMachine",
    "Step",
    "Trigger",
    "locked_checklist",
]
