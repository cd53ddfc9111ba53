"""
Affected attribute selection manager / 受影响属性选择管理器

Transient draft used while composing a quest: which attributes have been
picked (with strength), which are still available, and what the current
picker value is. Available attributes are always the complement of the
selected ones, sorted by the authoritative attribute order.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from app.account_setup.constants import NO_ATTRIBUTES_AVAILABLE_TEXT
from app.schemas.attribute import (
    AffectedAttribute,
    Attribute,
    AttributeStrength,
    create_affected_attribute,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectionState:
    available_attributes: Tuple[Attribute, ...] = ()
    selected_attributes: Tuple[AffectedAttribute, ...] = ()
    current_attribute_name: str = NO_ATTRIBUTES_AVAILABLE_TEXT
    current_attribute_strength: AttributeStrength = field(default=AttributeStrength.NORMAL)


def _first_name_or_sentinel(attributes: Sequence[Attribute]) -> str:
    return attributes[0].name if attributes else NO_ATTRIBUTES_AVAILABLE_TEXT


def _sorted(attributes: Sequence[Attribute]) -> Tuple[Attribute, ...]:
    return tuple(sorted(attributes, key=lambda a: a.order))


class SelectionManager:
    """
    选择草稿状态机

    Selection draft state machine. Operations whose preconditions fail leave
    the state untouched.
    """

    def __init__(self, attributes: Optional[Sequence[Attribute]] = None):
        self._attributes: List[Attribute] = list(attributes or [])
        self._state = SelectionState()
        self.reset_selection_ui()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_attributes(self) -> List[AffectedAttribute]:
        return list(self._state.selected_attributes)

    def set_current_attribute_name(self, name: str) -> None:
        self._state = replace(self._state, current_attribute_name=name)

    def set_attribute_strength(self, strength: AttributeStrength) -> None:
        self._state = replace(self._state, current_attribute_strength=AttributeStrength(strength))

    def add_affected_attribute(self) -> bool:
        """Move the current attribute from available to selected."""
        state = self._state
        name = state.current_attribute_name
        if name == NO_ATTRIBUTES_AVAILABLE_TEXT:
            return False
        if any(selected.name == name for selected in state.selected_attributes):
            logger.warning("Attribute %s is already selected", name)
            return False
        if not any(attr.name == name for attr in state.available_attributes):
            logger.warning("Attribute %s is not available for selection", name)
            return False

        available = tuple(attr for attr in state.available_attributes if attr.name != name)
        selected = state.selected_attributes + (
            create_affected_attribute(name, state.current_attribute_strength),
        )
        self._state = SelectionState(
            available_attributes=available,
            selected_attributes=selected,
            current_attribute_name=_first_name_or_sentinel(available),
            current_attribute_strength=AttributeStrength.NORMAL,
        )
        return True

    def delete_affected_attribute(self, name: str) -> bool:
        """Return a selected attribute to the available list."""
        state = self._state
        if not any(selected.name == name for selected in state.selected_attributes):
            logger.warning("Attribute %s is not selected", name)
            return False

        selected = tuple(s for s in state.selected_attributes if s.name != name)
        restored = next((attr for attr in self._attributes if attr.name == name), None)
        available = state.available_attributes
        if restored is not None:
            available = _sorted(available + (restored,))

        current = state.current_attribute_name
        if current == NO_ATTRIBUTES_AVAILABLE_TEXT and restored is not None:
            current = restored.name

        self._state = replace(
            state,
            available_attributes=available,
            selected_attributes=selected,
            current_attribute_name=current,
        )
        return True

    def reset_selection_ui(self) -> None:
        available = _sorted(self._attributes)
        self._state = SelectionState(
            available_attributes=available,
            selected_attributes=(),
            current_attribute_name=_first_name_or_sentinel(available),
            current_attribute_strength=AttributeStrength.NORMAL,
        )

    def sync_with_available_attributes(self, attributes: Sequence[Attribute]) -> None:
        """
        Reconcile the draft with a new attribute collection.

        Selected names that no longer exist are dropped, available becomes the
        complement again, and the current name falls back to the first
        available attribute (or the sentinel) when it is gone. Idempotent.
        """
        self._attributes = list(attributes)
        names = {attr.name for attr in self._attributes}
        state = self._state

        selected = tuple(s for s in state.selected_attributes if s.name in names)
        selected_names = {s.name for s in selected}
        available = _sorted([attr for attr in self._attributes if attr.name not in selected_names])
        available_names = {attr.name for attr in available}

        current = state.current_attribute_name
        if current not in available_names:
            current = _first_name_or_sentinel(available)

        self._state = replace(
            state,
            available_attributes=available,
            selected_attributes=selected,
            current_attribute_name=current,
        )
