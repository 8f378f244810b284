"""Item model and the pure operations of the item store.

The item sequence is an immutable tuple. Every operation takes the current
snapshot and returns a new one; nothing is mutated in place. Operations are
total: an unknown id leaves the snapshot unchanged instead of raising, so a
front-end holding a stale reference cannot break the session.

Priority is implicit. The rank of a glass item is its index among the glass
items of the sequence (0 = highest). Rubber order is insertion order and has
no priority meaning.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from glassrubber.models.schemas import ItemSchema, ItemType

from .layout import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Item:
    id: str
    text: str
    type: ItemType = ItemType.RUBBER
    action: Optional[str] = None
    handled: Optional[bool] = None
    pos: Optional[Position] = None

    @property
    def is_glass(self) -> bool:
        return self.type is ItemType.GLASS

    @property
    def is_handled(self) -> bool:
        return bool(self.handled)

    def to_dict(self) -> dict:
        """Serialize in the stored shape; absent optional fields are omitted."""
        out: dict = {"id": self.id, "text": self.text, "type": self.type.value}
        if self.pos is not None:
            out["pos"] = self.pos.to_dict()
        if self.action is not None:
            out["action"] = self.action
        if self.handled is not None:
            out["handled"] = self.handled
        return out

    @classmethod
    def from_schema(cls, schema: ItemSchema) -> "Item":
        return cls(
            id=schema.id,
            text=schema.text,
            type=schema.type,
            action=schema.action,
            handled=schema.handled,
            pos=Position.from_schema(schema.pos) if schema.pos else None,
        )


Items = Tuple[Item, ...]


def find_item(items: Items, item_id: str) -> Optional[Item]:
    for item in items:
        if item.id == item_id:
            return item
    return None


def glass_items(items: Items) -> Items:
    return tuple(i for i in items if i.is_glass)


def rubber_items(items: Items) -> Items:
    return tuple(i for i in items if not i.is_glass)


def _update(items: Items, item_id: str, **changes) -> Items:
    if find_item(items, item_id) is None:
        logger.debug("Ignoring update for unknown item %s", item_id)
        return items
    return tuple(replace(i, **changes) if i.id == item_id else i for i in items)


def add_item(
    items: Items,
    text: str,
    *,
    new_id: str,
    pos: Optional[Position] = None,
) -> Items:
    """Append a new rubber item. Blank text is a no-op."""
    if not text or not text.strip():
        return items
    return items + (Item(id=new_id, text=text, pos=pos),)


def set_type(items: Items, item_id: str, item_type: ItemType) -> Items:
    try:
        item_type = ItemType(item_type)
    except ValueError:
        logger.debug("Ignoring unknown item type %r", item_type)
        return items
    return _update(items, item_id, type=item_type)


def toggle_type(items: Items, item_id: str) -> Items:
    item = find_item(items, item_id)
    if item is None:
        return items
    flipped = ItemType.RUBBER if item.is_glass else ItemType.GLASS
    return _update(items, item_id, type=flipped)


def reorder_glass(items: Items, new_glass_order: Sequence[str]) -> Items:
    """Re-rank glass items.

    ``new_glass_order`` must be a permutation of the current glass ids,
    otherwise the snapshot is returned unchanged. Glass items come first in
    the result, followed by rubber items in their existing relative order.
    """
    glass = glass_items(items)
    order = list(new_glass_order)
    if not all(isinstance(i, str) for i in order) or Counter(order) != Counter(
        i.id for i in glass
    ):
        logger.debug("Ignoring reorder that is not a permutation of glass ids")
        return items

    by_id = {i.id: i for i in glass}
    return tuple(by_id[i] for i in order) + rubber_items(items)


def move_glass(items: Items, item_id: str, offset: int) -> Items:
    """Move a glass item ``offset`` ranks (negative = higher priority)."""
    ids = [i.id for i in glass_items(items)]
    if item_id not in ids:
        return items
    current = ids.index(item_id)
    target = max(0, min(len(ids) - 1, current + offset))
    if target == current:
        return items
    ids.insert(target, ids.pop(current))
    return reorder_glass(items, ids)


def set_action(items: Items, item_id: str, text: str) -> Items:
    return _update(items, item_id, action=text)


def toggle_handled(items: Items, item_id: str) -> Items:
    item = find_item(items, item_id)
    if item is None:
        return items
    return _update(items, item_id, handled=not item.is_handled)
