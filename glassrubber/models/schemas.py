"""Pydantic schemas to validate persisted planner state.

These schemas act as contracts at the storage boundary: anything read back
from the key/value store is parsed through them, and a payload that does not
fit is treated as absent rather than trusted.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, RootModel, field_validator


class ItemType(str, Enum):
    """Glass items must not be dropped; rubber items can bounce."""

    GLASS = "glass"
    RUBBER = "rubber"


class Energy(str, Enum):
    """Self-reported energy for the day, chosen on the balance screen."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DayState(str, Enum):
    """Only a locked day is ever persisted."""

    LOCKED = "locked"


class PositionSchema(BaseModel):
    top: str
    left: str
    rotation: int = 0

    @field_validator("top", "left")
    @classmethod
    def percentage(cls, v: str) -> str:
        try:
            float(v.strip().rstrip("%"))
        except ValueError:
            raise ValueError(f"Not a percentage: {v!r}")
        return v


class ItemSchema(BaseModel):
    id: str = Field(min_length=1)
    text: str
    type: ItemType = ItemType.RUBBER
    action: Optional[str] = None
    handled: Optional[bool] = None
    pos: Optional[PositionSchema] = None

    @field_validator("text")
    @classmethod
    def text_nonempty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Item text cannot be empty")
        return v


class DayRecordSchema(BaseModel):
    date: str = Field(min_length=1)
    state: DayState
    data: List[ItemSchema] = Field(default_factory=list)

    @field_validator("data")
    @classmethod
    def unique_ids(cls, v: List[ItemSchema]) -> List[ItemSchema]:
        seen = set()
        for item in v:
            if item.id in seen:
                raise ValueError(f"Duplicate item id: {item.id}")
            seen.add(item.id)
        return v


class RecentsSchema(RootModel[List[str]]):
    """Most-recent-first list of glass texts from previous locks."""
