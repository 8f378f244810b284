"""Recently committed glass texts, offered as quick-add suggestions."""

from __future__ import annotations

import logging
from typing import Iterable, List

from .items import Items, glass_items

logger = logging.getLogger(__name__)

RECENTS_CAP = 10


def merge_recents(
    glass_texts: Iterable[str],
    previous: Iterable[str],
    cap: int = RECENTS_CAP,
) -> List[str]:
    """New texts first, then previous ones; first occurrence wins."""
    merged = dict.fromkeys(list(glass_texts) + list(previous))
    return list(merged)[:cap]


def visible_recents(recents: Iterable[str], items: Items) -> List[str]:
    """Recents not already captured today."""
    present = {i.text for i in items}
    return [r for r in recents if r not in present]


class RecencyTracker:
    """Reads and updates the persisted recents through the plan storage."""

    def __init__(self, storage, cap: int = RECENTS_CAP):
        self.storage = storage
        self.cap = cap

    def record_lock(self, items: Items) -> List[str]:
        texts = [i.text for i in glass_items(items)]
        recents = merge_recents(texts, self.storage.load_recents(), cap=self.cap)
        self.storage.save_recents(recents)
        logger.info("Recents updated (%d entries)", len(recents))
        return recents

    def suggestions(self, items: Items) -> List[str]:
        return visible_recents(self.storage.load_recents(), items)
