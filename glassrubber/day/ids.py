"""Identity generation for items.

Injected into the state machine so tests can use deterministic ids.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def random_id() -> str:
    """Short opaque id, 9 hex characters."""
    return uuid.uuid4().hex[:9]


class CounterIdGenerator:
    """Monotonic ids: ``item-1``, ``item-2``, ..."""

    def __init__(self, prefix: str = "item", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
