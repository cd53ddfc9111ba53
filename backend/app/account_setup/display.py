"""
Strength display helpers / 强度显示工具

Single home for the strength display map and the affected attribute ordering
used when rendering a quest.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from app.account_setup.constants import STRENGTH_TO_INT
from app.schemas.attribute import AffectedAttribute, Attribute, AttributeStrength

STRENGTH_DISPLAY: Dict[AttributeStrength, str] = {
    AttributeStrength.NORMAL: "normal",
    AttributeStrength.PLUS: "+",
    AttributeStrength.PLUS_PLUS: "++",
}


def get_strength_display(strength: AttributeStrength, hide_normal: bool = False) -> str:
    """
    Display text for a strength.

    ``hide_normal`` renders ``normal`` as an empty string, which is how chips
    next to an attribute name show it.
    """
    strength = AttributeStrength(strength)
    if hide_normal and strength == AttributeStrength.NORMAL:
        return ""
    return STRENGTH_DISPLAY[strength]


def get_attribute_display_string(affected: AffectedAttribute) -> str:
    """e.g. ``Vitality ++`` or ``Discipline``."""
    suffix = get_strength_display(affected.strength, hide_normal=True)
    return f"{affected.name} {suffix}" if suffix else affected.name


def sort_affected_attributes(affected: Iterable[AffectedAttribute]) -> List[AffectedAttribute]:
    """Strongest first, ties broken by name."""
    return sorted(affected, key=lambda a: (-STRENGTH_TO_INT[a.strength], a.name))


def has_attribute_been_deleted_or_swapped(
    previous: Optional[Sequence[Attribute]],
    current: Sequence[Attribute],
) -> bool:
    """
    True when the collection shrank or a previously present name is gone.

    Pure growth returns False so additions never trigger a reference scan.
    """
    if previous is None:
        return False
    if len(current) < len(previous):
        return True
    current_names = {attr.name for attr in current}
    return any(attr.name not in current_names for attr in previous)
