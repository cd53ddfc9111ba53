"""Attribute collection manager tests."""
import pytest

from app.account_setup.attribute_manager import AttributeManager
from app.exceptions import ValidationError
from app.schemas.attribute import Attribute


def _orders(manager):
    return [a.order for a in manager.attributes]


def _names(manager):
    return [a.name for a in manager.attributes]


def test_add_then_protected_delete():
    manager = AttributeManager([Attribute(name="Discipline", order=0)])
    manager.add_attribute("Vitality")
    assert [(a.name, a.order) for a in manager.attributes] == [("Discipline", 0), ("Vitality", 1)]

    assert manager.delete_attribute("Discipline") is False
    assert _names(manager) == ["Discipline", "Vitality"]


def test_add_trims_name():
    manager = AttributeManager([Attribute(name="Discipline", order=0)])
    attr = manager.add_attribute("  Focus  ")
    assert attr.name == "Focus"
    assert attr.order == 1


@pytest.mark.parametrize(
    "name, message",
    [
        ("", "Attribute name cannot be less than 1 character"),
        ("   ", "Attribute name cannot be less than 1 character"),
        ("x" * 31, "Attribute name cannot exceed 30 characters"),
        ("Bad<tag>", "Attribute name contains invalid characters"),
        ("discipline", "An attribute with this name already exists."),
    ],
)
def test_add_rejects_invalid_names(name, message):
    manager = AttributeManager([Attribute(name="Discipline", order=0)])
    with pytest.raises(ValidationError) as excinfo:
        manager.add_attribute(name)
    assert message in excinfo.value.field_errors["attribute_name"]
    assert _names(manager) == ["Discipline"]


def test_add_rejects_reserved_sentinel():
    manager = AttributeManager([Attribute(name="Discipline", order=0)])
    with pytest.raises(ValidationError):
        manager.add_attribute("n/a")


def test_add_accepts_thirty_characters():
    manager = AttributeManager()
    manager.add_attribute("x" * 30)
    assert len(manager.attributes) == 1


def test_add_rejects_when_full():
    manager = AttributeManager([Attribute(name=f"Attr {i}", order=i) for i in range(50)])
    with pytest.raises(ValidationError) as excinfo:
        manager.add_attribute("One more")
    assert "No more than 50" in excinfo.value.message


def test_delete_shifts_later_orders(attributes):
    manager = AttributeManager(attributes)
    assert manager.delete_attribute("Vitality") is True
    assert _names(manager) == ["Discipline", "Intelligence"]
    assert _orders(manager) == [0, 1]


def test_delete_unknown_is_noop(attributes):
    manager = AttributeManager(attributes)
    before = manager.attributes
    assert manager.delete_attribute("Charisma") is False
    assert manager.attributes == before


def test_delete_with_stale_order_hint_uses_name(attributes):
    manager = AttributeManager(attributes)
    stale = Attribute(name="Intelligence", order=0)
    assert manager.delete_attribute(stale) is True
    assert _names(manager) == ["Discipline", "Vitality"]


def test_swap_up_and_down(attributes):
    manager = AttributeManager(attributes)
    assert manager.swap_attribute_up("Intelligence") is True
    assert _names(manager) == ["Discipline", "Intelligence", "Vitality"]
    assert manager.swap_attribute_down("Discipline") is True
    assert _names(manager) == ["Intelligence", "Discipline", "Vitality"]
    assert _orders(manager) == [0, 1, 2]


def test_swap_at_boundary_is_noop(attributes):
    manager = AttributeManager(attributes)
    assert manager.swap_attribute_up("Discipline") is False
    assert manager.swap_attribute_down("Intelligence") is False
    assert _names(manager) == ["Discipline", "Vitality", "Intelligence"]


def test_constructor_recomputes_orders():
    manager = AttributeManager([Attribute(name="A", order=5), Attribute(name="B", order=9)])
    assert _orders(manager) == [0, 1]


def test_orders_stay_contiguous_over_sequence():
    manager = AttributeManager([Attribute(name="Discipline", order=0)])
    for name in ("A", "B", "C", "D"):
        manager.add_attribute(name)
    manager.delete_attribute("B")
    manager.swap_attribute_up("D")
    manager.delete_attribute("A")
    manager.add_attribute("E")
    assert _orders(manager) == list(range(len(manager.attributes)))
