"""
Account setup validation / 账户设置校验

Field-scoped validation for user supplied names and for the complete
{attributes, quests} graph before submission. Validators return messages,
they never raise.
"""

from typing import Any, Dict, Iterable, List, Sequence

from app.account_setup.constants import (
    ATTRIBUTE_NAME_MAX_LENGTH,
    ATTRIBUTE_NAME_MIN_LENGTH,
    MAX_AFFECTED_ATTRIBUTES_PER_QUEST,
    MAX_ATTRIBUTES_ALLOWED,
    MAX_EXPERIENCE_POINTS_PER_QUEST,
    MAX_QUESTS_ALLOWED,
    MIN_AFFECTED_ATTRIBUTES_PER_QUEST,
    MIN_ATTRIBUTES_ALLOWED,
    MIN_QUESTS_ALLOWED,
    NO_ATTRIBUTES_AVAILABLE_TEXT,
    QUEST_NAME_MAX_LENGTH,
    QUEST_NAME_MIN_LENGTH,
    REQUIRED_ATTRIBUTE_NAME,
    SAFE_CHARACTERS_REGEX,
    STRENGTH_TO_INT,
    TOTAL_EXPERIENCE_POINTS,
)
from app.account_setup.ordering import orders_are_contiguous
from app.exceptions import FieldErrors
from app.schemas.attribute import Attribute
from app.schemas.quest import Quest
from app.utils.text import add_s_if_plural_or_zero, normalize_name


def validate_name(name: str, *, label: str, min_length: int, max_length: int) -> List[str]:
    """
    Check length and character set of a trimmed name.

    Args:
        name: Raw user input
        label: Prefix used in messages ("Attribute", "Quest")
        min_length: Minimum length after trimming
        max_length: Maximum length after trimming

    Returns:
        List of error messages, empty when the name is valid
    """
    trimmed = (name or "").strip()
    if len(trimmed) < min_length:
        return [
            f"{label} name cannot be less than {min_length} "
            f"{add_s_if_plural_or_zero('character', min_length)}"
        ]

    errors: List[str] = []
    if len(trimmed) > max_length:
        errors.append(f"{label} name cannot exceed {max_length} characters")
    if not SAFE_CHARACTERS_REGEX.match(trimmed):
        errors.append(f"{label} name contains invalid characters")
    return errors


def validate_attribute_name(name: str, existing: Sequence[Attribute]) -> List[str]:
    """Validate a candidate attribute name against the current collection."""
    errors = validate_name(
        name,
        label="Attribute",
        min_length=ATTRIBUTE_NAME_MIN_LENGTH,
        max_length=ATTRIBUTE_NAME_MAX_LENGTH,
    )
    if errors:
        return errors

    candidate = normalize_name(name)
    if candidate == normalize_name(NO_ATTRIBUTES_AVAILABLE_TEXT):
        return [f'"{NO_ATTRIBUTES_AVAILABLE_TEXT}" is a reserved name']
    if candidate in {normalize_name(attr.name) for attr in existing}:
        return ["An attribute with this name already exists."]
    return []


def validate_quest_name(name: str, existing: Sequence[Quest]) -> List[str]:
    """Validate a candidate quest name against the committed quests."""
    errors = validate_name(
        name,
        label="Quest",
        min_length=QUEST_NAME_MIN_LENGTH,
        max_length=QUEST_NAME_MAX_LENGTH,
    )
    if errors:
        return errors

    if normalize_name(name) in {normalize_name(quest.name) for quest in existing}:
        return ["A quest with this name already exists."]
    return []


def has_unique_values(items: Iterable[Any], key: str) -> bool:
    """
    True when every item has a distinct value for ``key``.

    Strings are compared trimmed and lower-cased. Items may be mappings or
    objects exposing ``key`` as an attribute.
    """
    values = []
    for item in items:
        value = item[key] if isinstance(item, dict) else getattr(item, key)
        values.append(normalize_name(value) if isinstance(value, str) else value)
    return len(values) == len(set(values))


def validate_profile(attributes: Sequence[Attribute], quests: Sequence[Quest]) -> FieldErrors:
    """
    Validate the complete attribute and quest graph.

    Args:
        attributes: Attribute collection in display order
        quests: Quest collection in display order

    Returns:
        Field error map ({"attributes": [...], "quests": [...]}), empty when valid
    """
    errors: Dict[str, List[str]] = {}

    def add(field: str, message: str) -> None:
        errors.setdefault(field, []).append(message)

    # Attributes
    if len(attributes) < MIN_ATTRIBUTES_ALLOWED:
        add("attributes", "At least one attribute is required")
    if len(attributes) > MAX_ATTRIBUTES_ALLOWED:
        add("attributes", f"No more than {MAX_ATTRIBUTES_ALLOWED} attributes are allowed")
    for attr in attributes:
        for message in validate_name(
            attr.name,
            label="Attribute",
            min_length=ATTRIBUTE_NAME_MIN_LENGTH,
            max_length=ATTRIBUTE_NAME_MAX_LENGTH,
        ):
            add("attributes", f"{message}: {attr.name!r}")
    if not has_unique_values(attributes, "name"):
        add("attributes", "Attribute names must be unique")
    if attributes and REQUIRED_ATTRIBUTE_NAME not in {attr.name for attr in attributes}:
        add("attributes", f"The {REQUIRED_ATTRIBUTE_NAME} attribute is required")
    if not orders_are_contiguous(attributes):
        add("attributes", "Attribute order must be contiguous and start at 0")

    # Quests
    if len(quests) < MIN_QUESTS_ALLOWED:
        add("quests", "At least one quest is required")
    if len(quests) > MAX_QUESTS_ALLOWED:
        add("quests", f"No more than {MAX_QUESTS_ALLOWED} quests are allowed")
    if not has_unique_values(quests, "name"):
        add("quests", "Quest names must be unique")
    if not orders_are_contiguous(quests):
        add("quests", "Quest order must be contiguous and start at 0")

    attribute_names = {attr.name for attr in attributes}
    for quest in quests:
        for message in validate_name(
            quest.name,
            label="Quest",
            min_length=QUEST_NAME_MIN_LENGTH,
            max_length=QUEST_NAME_MAX_LENGTH,
        ):
            add("quests", f"{message}: {quest.name!r}")

        count = len(quest.affected_attributes)
        if count < MIN_AFFECTED_ATTRIBUTES_PER_QUEST:
            add("quests", f"Quest {quest.name!r} needs at least one affected attribute")
        if count > MAX_AFFECTED_ATTRIBUTES_PER_QUEST:
            add(
                "quests",
                f"Quest {quest.name!r} cannot affect more than "
                f"{MAX_AFFECTED_ATTRIBUTES_PER_QUEST} attributes",
            )
        if not has_unique_values(quest.affected_attributes, "name"):
            add("quests", f"Quest {quest.name!r} lists an affected attribute more than once")
        for affected in quest.affected_attributes:
            if affected.name not in attribute_names:
                add("quests", f"Quest {quest.name!r} references unknown attribute {affected.name!r}")
            if affected.strength not in STRENGTH_TO_INT:
                add("quests", f"Quest {quest.name!r} has an invalid strength for {affected.name!r}")

        if not 0 <= quest.experience_point_value <= MAX_EXPERIENCE_POINTS_PER_QUEST:
            add(
                "quests",
                f"Quest {quest.name!r} experience must be between 0 and "
                f"{MAX_EXPERIENCE_POINTS_PER_QUEST}",
            )

    total = sum(quest.experience_point_value for quest in quests)
    if total > TOTAL_EXPERIENCE_POINTS:
        add("quests", f"Total experience cannot exceed {TOTAL_EXPERIENCE_POINTS} points")

    return errors
