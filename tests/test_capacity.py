import math

import pytest

from glassrubber.day import capacity
from glassrubber.day.items import Item, Items, move_glass, reorder_glass
from glassrubber.models.schemas import Energy, ItemType


def _glass(n: int) -> Items:
    return tuple(Item(id=f"g{i}", text=f"Glass {i}", type=ItemType.GLASS) for i in range(n))


@pytest.mark.parametrize(
    "energy,expected",
    [(Energy.LOW, 1), (Energy.MEDIUM, 3), (Energy.HIGH, 5), (None, math.inf)],
)
def test_glass_limit_per_energy(energy, expected):
    """Low, medium and high carry 1, 3 and 5; unset is unbounded."""
    assert capacity.glass_limit(energy) == expected


def test_glass_limit_accepts_plain_strings():
    """Stored string values resolve like enum members."""
    assert capacity.glass_limit("medium") == 3


@pytest.mark.parametrize("energy", [Energy.LOW, Energy.MEDIUM, Energy.HIGH, None])
def test_item_is_active_iff_rank_below_limit(energy):
    """Active and postponed follow rank against the limit."""
    items = _glass(7)
    limit = capacity.glass_limit(energy)
    for slot in capacity.glass_slots(items, energy):
        assert slot.active == (slot.rank < limit)
        assert slot.postponed == (not slot.active)


def test_unset_energy_postpones_nothing():
    """Before an energy choice every glass item is active."""
    items = _glass(12)
    assert capacity.postponed_glass(items, None) == []
    assert len(capacity.active_glass(items, None)) == 12


def test_rubber_items_do_not_take_capacity():
    """Only glass items count towards the limit."""
    items = (
        Item(id="r1", text="Rubber"),
        Item(id="g1", text="First", type=ItemType.GLASS),
        Item(id="r2", text="Rubber 2"),
        Item(id="g2", text="Second", type=ItemType.GLASS),
    )
    active = capacity.active_glass(items, Energy.LOW)
    assert [i.id for i in active] == ["g1"]
    assert [i.id for i in capacity.postponed_glass(items, Energy.LOW)] == ["g2"]


def test_reorder_recomputes_status_from_rank():
    """Status is derived, so it moves with the item."""
    items = _glass(3)
    assert [i.id for i in capacity.active_glass(items, Energy.LOW)] == ["g0"]

    reordered = reorder_glass(items, ["g2", "g0", "g1"])
    assert [i.id for i in capacity.active_glass(reordered, Energy.LOW)] == ["g2"]

    moved = move_glass(reordered, "g1", -2)
    assert [i.id for i in capacity.active_glass(moved, Energy.LOW)] == ["g1"]


def test_postponed_items_keep_their_action():
    """Postponing an item does not clear its action."""
    items = (
        Item(id="a", text="A", type=ItemType.GLASS, action="first step"),
        Item(id="b", text="B", type=ItemType.GLASS, action="second step"),
    )
    postponed = capacity.postponed_glass(items, Energy.LOW)
    assert postponed[0].action == "second step"


def test_too_much_glass_is_a_soft_threshold():
    """The warning fires above the threshold only."""
    assert not capacity.too_much_glass(_glass(5))
    assert capacity.too_much_glass(_glass(6))
    assert capacity.too_much_glass(_glass(3), threshold=2)
