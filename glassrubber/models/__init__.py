"""Data schemas and validation."""
from .schemas import (
    DayRecordSchema,
    DayState,
    Energy,
    ItemSchema,
    ItemType,
    PositionSchema,
    RecentsSchema,
)

__all__ = [
    "DayRecordSchema",
    "DayState",
    "Energy",
    "ItemSchema",
    "ItemType",
    "PositionSchema",
    "RecentsSchema",
]
