"""Day flow: Dump -> Select -> (Explain) -> Balance -> Locked.

The machine owns the current item snapshot and the session's energy choice.
Persistence goes through the injected ``PlanStorage``; ids, the calendar day
and layout randomness are injected too.

Triggers never raise. A trigger fired in a state that does not offer it is
logged and ignored, and every trigger returns the resulting step.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Union

from glassrubber.models.schemas import Energy, ItemType
from glassrubber.utils.logger import get_logger

from . import items as store
from .ids import IdGenerator, random_id
from .items import Items
from .layout import safe_position
from .recency import RecencyTracker
from .record import DayClock, DayRecord, today_key

logger = get_logger(__name__)


class Step(str, Enum):
    DUMP = "dump"
    SELECT = "select"
    EXPLAIN = "explain"
    BALANCE = "balance"
    LOCKED = "locked"


class Trigger(str, Enum):
    FINISH_DUMP = "finish_dump"
    FINISH_SELECTION = "finish_selection"
    DISMISS_EXPLANATION = "dismiss_explanation"
    LOCK = "lock"
    RESET = "reset"


ALLOWED: Dict[Trigger, FrozenSet[Step]] = {
    Trigger.FINISH_DUMP: frozenset({Step.DUMP}),
    Trigger.FINISH_SELECTION: frozenset({Step.SELECT}),
    Trigger.DISMISS_EXPLANATION: frozenset({Step.EXPLAIN}),
    Trigger.LOCK: frozenset({Step.BALANCE}),
    Trigger.RESET: frozenset({Step.LOCKED}),
}

Confirmation = Union[bool, Callable[[], bool]]


class DayStateMachine:
    def __init__(
        self,
        storage,
        *,
        id_generator: IdGenerator = random_id,
        clock: DayClock = today_key,
        rng: Optional[random.Random] = None,
        step: Step = Step.DUMP,
        items: Items = (),
    ):
        self.storage = storage
        self.recency = RecencyTracker(storage)
        self.id_generator = id_generator
        self.clock = clock
        self.rng = rng or random.Random()
        self.step = step
        self.items: Items = tuple(items)
        self.energy: Optional[Energy] = None

    @classmethod
    def resume(cls, storage, **kwargs) -> "DayStateMachine":
        """Start a session, restoring today's locked day when there is one.

        A record from another day is ignored but left in storage.
        """
        clock: DayClock = kwargs.get("clock", today_key)
        record = storage.load_day()
        if record is not None and record.date == clock():
            logger.info("Resuming locked day %s (%d items)", record.date, len(record.items))
            return cls(storage, step=Step.LOCKED, items=record.items, **kwargs)
        if record is not None:
            logger.info("Ignoring stored day %s", record.date)
        return cls(storage, **kwargs)

    # Derived state ------------------------------------------------------

    @property
    def glass(self) -> Items:
        return store.glass_items(self.items)

    @property
    def rubber(self) -> Items:
        return store.rubber_items(self.items)

    @property
    def intro_seen(self) -> bool:
        return self.storage.intro_seen()

    def recents(self) -> List[str]:
        """Quick-add suggestions not already captured today."""
        return self.recency.suggestions(self.items)

    # Transitions --------------------------------------------------------

    def _offers(self, trigger: Trigger) -> bool:
        if self.step in ALLOWED[trigger]:
            return True
        logger.debug("Ignoring %s in %s", trigger.value, self.step.value)
        return False

    def _enter(self, target: Step) -> Step:
        logger.info("Step %s -> %s", self.step.value, target.value)
        self.step = target
        return self.step

    def finish_dump(self) -> Step:
        if not self._offers(Trigger.FINISH_DUMP):
            return self.step
        return self._enter(Step.SELECT)

    def finish_selection(self) -> Step:
        if not self._offers(Trigger.FINISH_SELECTION):
            return self.step
        if self.storage.intro_seen():
            return self._enter(Step.BALANCE)
        return self._enter(Step.EXPLAIN)

    def dismiss_explanation(self) -> Step:
        if not self._offers(Trigger.DISMISS_EXPLANATION):
            return self.step
        self.storage.mark_intro_seen()
        return self._enter(Step.BALANCE)

    def lock(self) -> Step:
        if not self._offers(Trigger.LOCK):
            return self.step
        if self.energy is None:
            logger.debug("Ignoring lock without an energy level")
            return self.step
        self.recency.record_lock(self.items)
        self.storage.save_day(DayRecord(date=self.clock(), items=self.items))
        return self._enter(Step.LOCKED)

    def reset(self, confirm: Confirmation = False) -> Step:
        """Discard the locked day. Needs an explicit confirmation."""
        if not self._offers(Trigger.RESET):
            return self.step
        confirmed = confirm() if callable(confirm) else bool(confirm)
        if not confirmed:
            logger.info("Reset declined")
            return self.step
        self.storage.clear_day()
        self.items = ()
        self.energy = None
        return self._enter(Step.DUMP)

    # Item edits ---------------------------------------------------------

    def _editable(self, action: str) -> bool:
        if self.step is Step.LOCKED:
            logger.debug("Ignoring %s on a locked day", action)
            return False
        return True

    def _fresh_id(self) -> str:
        taken = {i.id for i in self.items}
        new_id = self.id_generator()
        while new_id in taken:
            new_id = self.id_generator()
        return new_id

    def add_item(self, text: str) -> Items:
        if not self._editable("add_item"):
            return self.items
        if not text or not text.strip():
            return self.items
        pos = safe_position([i.pos for i in self.items], self.rng)
        self.items = store.add_item(self.items, text, new_id=self._fresh_id(), pos=pos)
        return self.items

    def add_recent(self, text: str) -> Items:
        return self.add_item(text)

    def toggle_type(self, item_id: str) -> Items:
        if self._editable("toggle_type"):
            self.items = store.toggle_type(self.items, item_id)
        return self.items

    def set_type(self, item_id: str, item_type: ItemType) -> Items:
        if self._editable("set_type"):
            self.items = store.set_type(self.items, item_id, item_type)
        return self.items

    def select_energy(self, energy: Optional[Energy]) -> Optional[Energy]:
        if self.step is not Step.BALANCE:
            logger.debug("Ignoring energy choice in %s", self.step.value)
            return self.energy
        if energy is None:
            self.energy = None
            return self.energy
        try:
            self.energy = Energy(energy)
        except ValueError:
            logger.debug("Ignoring unknown energy %r", energy)
        return self.energy

    def reorder_glass(self, new_glass_order: Sequence[str]) -> Items:
        if self._editable("reorder_glass"):
            self.items = store.reorder_glass(self.items, new_glass_order)
        return self.items

    def move_glass(self, item_id: str, offset: int) -> Items:
        if self._editable("move_glass"):
            self.items = store.move_glass(self.items, item_id, offset)
        return self.items

    def set_action(self, item_id: str, text: str) -> Items:
        if self._editable("set_action"):
            self.items = store.set_action(self.items, item_id, text)
        return self.items

    def toggle_handled(self, item_id: str) -> Items:
        """Flip ``handled``; on a locked day the record is re-saved at once."""
        updated = store.toggle_handled(self.items, item_id)
        if updated is self.items:
            return self.items
        self.items = updated
        if self.step is Step.LOCKED:
            self.storage.save_day(DayRecord(date=self.clock(), items=self.items))
        return self.items
