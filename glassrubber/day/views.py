"""Pure view-model helpers the front-end renders from."""

from __future__ import annotations

from typing import List

from .items import Item, Items, glass_items


def locked_checklist(items: Items) -> List[Item]:
    """Glass items actively carried today, in rank order.

    An item counts as carried when its action is truthy, so an empty action
    string is the same as no action.
    """
    return [i for i in glass_items(items) if i.action]


def handled_count(items: Items) -> int:
    return sum(1 for i in locked_checklist(items) if i.is_handled)
