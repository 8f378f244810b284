"""
Glass & Rubber - a one-day planner.

Dump what's on your mind, decide which balls are glass and which are rubber,
give the glass ones a smallest safe action within today's energy, then lock
the day into a checklist.
"""

__version__ = "1.0.0"

# Only the pure planning core is imported by default; storage modules create
# the database engine on import.
from .day import DayStateMachine, Item, Step
from .models import Energy, ItemType

__all__ = [
    "DayStateMachine",
    "Item",
    "Step",
    "Energy",
    "ItemType",
]
