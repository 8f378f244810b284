import json
import random

import pytest

from glassrubber.database import DAY_KEY, INTRO_SEEN_KEY, RECENTS_KEY, InMemoryKeyValueStore, PlanStorage
from glassrubber.day import CounterIdGenerator, DayRecord, DayStateMachine, Item, Step, locked_checklist
from glassrubber.models.schemas import Energy, ItemType

TODAY = "Sat Oct 17 2026"
YESTERDAY = "Fri Oct 16 2026"


@pytest.fixture()
def kv():
    """Empty in-memory key/value store."""
    return InMemoryKeyValueStore()


@pytest.fixture()
def storage(kv):
    """PlanStorage over the in-memory store."""
    return PlanStorage(kv)


def _machine(storage, **kwargs) -> DayStateMachine:
    kwargs.setdefault("clock", lambda: TODAY)
    kwargs.setdefault("id_generator", CounterIdGenerator())
    kwargs.setdefault("rng", random.Random(7))
    return DayStateMachine.resume(storage, **kwargs)


def _to_balance(machine: DayStateMachine) -> DayStateMachine:
    machine.add_item("Call mom")
    machine.add_item("Buy milk")
    machine.add_item("Finish report")
    machine.finish_dump()
    machine.toggle_type("item-1")
    machine.toggle_type("item-3")
    machine.finish_selection()
    machine.dismiss_explanation()
    return machine


class TestInitialState:
    """Tests for DayStateMachine.resume."""

    def test_fresh_start_is_an_empty_dump(self, storage):
        """No stored day starts an empty dump."""
        machine = _machine(storage)
        assert machine.step is Step.DUMP
        assert machine.items == ()

    def test_todays_locked_record_is_restored(self, storage):
        """Today's record reopens the locked view with its items."""
        items = (Item(id="a", text="Call mom", type=ItemType.GLASS, action="dial"),)
        storage.save_day(DayRecord(date=TODAY, items=items))

        machine = _machine(storage)
        assert machine.step is Step.LOCKED
        assert machine.items == items

    def test_yesterdays_record_is_ignored_but_not_deleted(self, storage, kv):
        """A stale record starts a new day but stays in storage."""
        storage.save_day(DayRecord(date=YESTERDAY, items=(Item(id="a", text="Old"),)))

        machine = _machine(storage)
        assert machine.step is Step.DUMP
        assert machine.items == ()
        assert kv.get(DAY_KEY) is not None

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            json.dumps([1, 2, 3]),
            json.dumps({"date": TODAY, "state": "open", "data": []}),
            json.dumps({"date": TODAY, "state": "locked", "data": [{"id": "a"}]}),
        ],
    )
    def test_malformed_record_falls_back_to_dump(self, kv, raw):
        """Unreadable or invalid records are treated as absent."""
        kv.set(DAY_KEY, raw)
        machine = _machine(PlanStorage(kv))
        assert machine.step is Step.DUMP
        assert machine.items == ()


class TestFlow:
    """Tests for the forward transitions and item edits."""

    def test_dump_adds_rubber_items_with_positions(self, storage):
        """Dumped thoughts are rubber and get a layout position."""
        machine = _machine(storage)
        machine.add_item("Buy milk")
        machine.add_item("   ")
        assert len(machine.items) == 1
        item = machine.items[0]
        assert item.id == "item-1"
        assert item.type is ItemType.RUBBER
        assert item.pos is not None

    def test_ids_stay_unique_when_generator_repeats(self, storage):
        """A repeated id from the generator is skipped."""
        ids = iter(["dup", "dup", "fresh"])
        machine = _machine(storage, id_generator=lambda: next(ids))
        machine.add_item("One")
        machine.add_item("Two")
        assert [i.id for i in machine.items] == ["dup", "fresh"]

    def test_dump_to_select_has_no_item_guard(self, storage):
        """finish_dump works even with no items."""
        machine = _machine(storage)
        assert machine.finish_dump() is Step.SELECT

    def test_first_selection_goes_through_explain(self, storage, kv):
        """The explainer shows once and sets the intro flag."""
        machine = _machine(storage)
        machine.add_item("Call mom")
        machine.finish_dump()
        assert machine.finish_selection() is Step.EXPLAIN
        assert kv.get(INTRO_SEEN_KEY) is None

        assert machine.dismiss_explanation() is Step.BALANCE
        assert kv.get(INTRO_SEEN_KEY) == "true"

    def test_later_sessions_skip_explain(self, storage):
        """With the intro flag set, selection goes straight to balance."""
        _to_balance(_machine(storage))

        machine = _machine(storage)
        machine.add_item("Another day")
        machine.finish_dump()
        assert machine.finish_selection() is Step.BALANCE

    def test_zero_glass_is_valid(self, storage):
        """A day with no glass can still be locked."""
        storage.mark_intro_seen()
        machine = _machine(storage)
        machine.add_item("Only rubber")
        machine.finish_dump()
        assert machine.finish_selection() is Step.BALANCE
        machine.select_energy(Energy.HIGH)
        assert machine.lock() is Step.LOCKED
        assert locked_checklist(machine.items) == []

    def test_triggers_in_the_wrong_state_are_ignored(self, storage):
        """Out-of-place triggers return the current step."""
        machine = _machine(storage)
        machine.add_item("Call mom")
        assert machine.finish_selection() is Step.DUMP
        assert machine.dismiss_explanation() is Step.DUMP
        assert machine.lock() is Step.DUMP
        assert machine.reset(confirm=True) is Step.DUMP
        assert len(machine.items) == 1

    def test_energy_is_only_chosen_on_balance(self, storage):
        """Energy is ignored outside balance and validates its value."""
        machine = _machine(storage)
        assert machine.select_energy(Energy.LOW) is None
        _to_balance(machine)
        assert machine.select_energy("medium") is Energy.MEDIUM
        assert machine.select_energy("extreme") is Energy.MEDIUM
        assert machine.select_energy(None) is None

    def test_reorder_with_stale_ids_is_ignored(self, storage):
        """A None id in the new order leaves the items unchanged."""
        machine = _to_balance(_machine(storage))
        before = machine.items
        assert machine.reorder_glass(["item-3", None]) == before
        assert machine.items is before


class TestLock:
    """Tests for locking the day."""

    def test_lock_requires_energy(self, storage, kv):
        """Locking without an energy choice does nothing."""
        machine = _to_balance(_machine(storage))
        assert machine.lock() is Step.BALANCE
        assert kv.get(DAY_KEY) is None

    def test_lock_persists_the_exact_items_and_today(self, storage, kv):
        """The stored record holds every item in order, dated today."""
        machine = _to_balance(_machine(storage))
        machine.select_energy(Energy.LOW)
        machine.set_action("item-1", "Dial at lunch")
        machine.reorder_glass(["item-3", "item-1"])

        assert machine.lock() is Step.LOCKED
        stored = json.loads(kv.get(DAY_KEY))
        assert stored["date"] == TODAY
        assert stored["state"] == "locked"
        assert stored["data"] == [i.to_dict() for i in machine.items]
        assert [d["id"] for d in stored["data"]] == ["item-3", "item-1", "item-2"]

    def test_lock_updates_recents(self, storage, kv):
        """Glass texts are merged into the recents."""
        storage.save_recents(["Finish report", "Old task"])
        machine = _to_balance(_machine(storage))
        machine.select_energy(Energy.HIGH)
        machine.lock()
        assert json.loads(kv.get(RECENTS_KEY)) == ["Call mom", "Finish report", "Old task"]

    def test_recents_hide_texts_captured_today(self, storage):
        """Quick-add removes the suggestion and adds a rubber item."""
        storage.save_recents(["Call mom", "Gym"])
        machine = _machine(storage)
        assert machine.recents() == ["Call mom", "Gym"]
        machine.add_recent("Call mom")
        assert machine.recents() == ["Gym"]
        assert machine.items[-1].type is ItemType.RUBBER

    def test_locked_day_is_read_only_except_handled(self, storage):
        """Item edits are ignored once locked."""
        machine = _to_balance(_machine(storage))
        machine.select_energy(Energy.MEDIUM)
        machine.lock()
        before = machine.items

        machine.add_item("Sneaky")
        machine.toggle_type("item-2")
        machine.set_action("item-1", "changed")
        machine.reorder_glass(["item-3", "item-1"])
        assert machine.items == before

    def test_locked_checklist_filters_on_truthy_action(self, storage):
        """Glass items with an empty action are left off the checklist."""
        machine = _to_balance(_machine(storage))
        machine.select_energy(Energy.HIGH)
        machine.set_action("item-1", "Dial at lunch")
        machine.set_action("item-3", "")
        machine.lock()
        assert [i.id for i in locked_checklist(machine.items)] == ["item-1"]


class TestHandledAndReset:
    """Tests for the locked view: handled toggles and reset."""

    def _locked(self, storage):
        machine = _to_balance(_machine(storage))
        machine.select_energy(Energy.HIGH)
        machine.set_action("item-1", "Dial at lunch")
        machine.lock()
        return machine

    def test_toggle_handled_persists_immediately(self, storage, kv):
        """Each toggle re-saves the record and survives a restart."""
        machine = self._locked(storage)
        machine.toggle_handled("item-1")

        stored = json.loads(kv.get(DAY_KEY))
        assert stored["data"] == [i.to_dict() for i in machine.items]
        assert stored["data"][0]["handled"] is True

        restored = _machine(storage)
        assert restored.step is Step.LOCKED
        assert restored.items == machine.items

    def test_toggle_handled_before_lock_does_not_persist(self, storage, kv):
        """Nothing is stored before the day is locked."""
        machine = _to_balance(_machine(storage))
        machine.toggle_handled("item-1")
        assert machine.items[0].handled is True
        assert kv.get(DAY_KEY) is None

    def test_toggle_handled_on_unknown_id_is_a_noop(self, storage, kv):
        """A stale id does not rewrite the record."""
        machine = self._locked(storage)
        before = kv.get(DAY_KEY)
        machine.toggle_handled("missing")
        assert kv.get(DAY_KEY) == before

    def test_declined_reset_changes_nothing(self, storage, kv):
        """Declining keeps the locked day."""
        machine = self._locked(storage)
        items = machine.items
        assert machine.reset(confirm=False) is Step.LOCKED
        assert machine.reset(confirm=lambda: False) is Step.LOCKED
        assert machine.items == items
        assert kv.get(DAY_KEY) is not None

    def test_confirmed_reset_clears_everything(self, storage, kv):
        """Reset clears the record, items and energy."""
        machine = self._locked(storage)
        assert machine.reset(confirm=lambda: True) is Step.DUMP
        assert machine.items == ()
        assert machine.energy is None
        assert kv.get(DAY_KEY) is None

        fresh = _machine(storage)
        assert fresh.step is Step.DUMP
        assert fresh.items == ()

    def test_reset_keeps_recents_and_intro_flag(self, storage, kv):
        """Recents and the intro flag outlive a reset."""
        machine = self._locked(storage)
        machine.reset(confirm=True)
        assert kv.get(RECENTS_KEY) is not None
        assert kv.get(INTRO_SEEN_KEY) == "true"
