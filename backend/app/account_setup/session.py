"""
Account setup session / 账户设置会话

Top level controller for one user's account setup. It owns the attribute
collection and pushes every attribute change into the selection draft and the
quest reference cascade, so neither holds a stale copy.
"""

import uuid
from typing import Dict, List, Optional, Sequence

from app.account_setup.attribute_manager import AttributeManager
from app.account_setup.constants import (
    DEFAULT_ATTRIBUTE_NAMES,
    MAX_QUESTS_ALLOWED,
    REQUIRED_ATTRIBUTE_NAME,
)
from app.account_setup.display import get_attribute_display_string, sort_affected_attributes
from app.account_setup.quest_manager import QuestManager
from app.account_setup.selection_manager import SelectionManager
from app.account_setup.validation import validate_quest_name
from app.exceptions import FieldErrors, InvariantError, ValidationError
from app.schemas.attribute import (
    AffectedAttribute,
    Attribute,
    AttributeStrength,
    Direction,
    create_affected_attribute,
)
from app.schemas.quest import Quest, create_quest
from app.schemas.setup import SelectionSnapshot, SetupSessionSnapshot
from app.utils.logger import get_logger
from app.utils.text import get_noun_and_verb_agreement, normalize_name

logger = get_logger(__name__)


class AccountSetupSession:
    """
    账户设置会话控制器

    Account setup session controller.

    Attributes:
        session_id: 会话ID / Session ID
    """

    def __init__(self, attribute_names: Optional[Sequence[str]] = None, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex

        names = list(DEFAULT_ATTRIBUTE_NAMES if attribute_names is None else attribute_names)
        names = [n for n in names if normalize_name(n) != normalize_name(REQUIRED_ATTRIBUTE_NAME)]

        self._attributes = AttributeManager()
        for name in [REQUIRED_ATTRIBUTE_NAME, *names]:
            self._attributes.add_attribute(name)

        self._selection = SelectionManager(self._attributes.attributes)
        self._quests = QuestManager(self._attributes.attributes)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def attributes(self) -> List[Attribute]:
        return self._attributes.attributes

    @property
    def quests(self) -> List[Quest]:
        return self._quests.quests

    @property
    def points_remaining(self) -> int:
        return self._quests.points_remaining

    @property
    def selected_attributes(self) -> List[AffectedAttribute]:
        return self._selection.selected_attributes

    def submission_blockers(self) -> FieldErrors:
        """Reasons the profile cannot be submitted yet (empty when ready)."""
        blockers: Dict[str, List[str]] = {}
        if not self.attributes:
            blockers["attributes"] = ["Add at least one attribute"]
        if not self.quests:
            blockers["quests"] = ["Add at least one quest"]
        if self.points_remaining != 0:
            remaining = self.points_remaining
            blockers["experience_point_value"] = [
                f"{remaining} experience {get_noun_and_verb_agreement('point', remaining)} "
                "still unallocated"
            ]
        return blockers

    @property
    def ready_to_submit(self) -> bool:
        return not self.submission_blockers()

    def snapshot(self) -> SetupSessionSnapshot:
        state = self._selection.state
        return SetupSessionSnapshot(
            session_id=self.session_id,
            attributes=self.attributes,
            quests=self.quests,
            points_remaining=self.points_remaining,
            selection=SelectionSnapshot(
                available_attributes=list(state.available_attributes),
                selected_attributes=list(state.selected_attributes),
                current_attribute_name=state.current_attribute_name,
                current_attribute_strength=state.current_attribute_strength,
            ),
            ready_to_submit=self.ready_to_submit,
        )

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def add_attribute(self, name: str) -> Attribute:
        attribute = self._attributes.add_attribute(name)
        self._on_attributes_changed()
        return attribute

    def delete_attribute(self, name: str) -> bool:
        changed = self._attributes.delete_attribute(name)
        if changed:
            self._on_attributes_changed()
        return changed

    def move_attribute(self, name: str, direction: Direction) -> bool:
        if Direction(direction) == Direction.UP:
            changed = self._attributes.swap_attribute_up(name)
        else:
            changed = self._attributes.swap_attribute_down(name)
        if changed:
            self._on_attributes_changed()
        return changed

    def _on_attributes_changed(self) -> None:
        attributes = self._attributes.attributes
        self._selection.sync_with_available_attributes(attributes)
        if self._quests.observe_attributes(attributes):
            logger.info("Removed deleted attributes from quests in session %s", self.session_id)

    # ------------------------------------------------------------------
    # Selection draft
    # ------------------------------------------------------------------

    def update_selection(
        self,
        name: Optional[str] = None,
        strength: Optional[AttributeStrength] = None,
    ) -> None:
        if name is not None:
            self._selection.set_current_attribute_name(name)
        if strength is not None:
            self._selection.set_attribute_strength(strength)

    def add_affected_attribute(self) -> bool:
        return self._selection.add_affected_attribute()

    def delete_affected_attribute(self, name: str) -> bool:
        return self._selection.delete_affected_attribute(name)

    def reset_selection(self) -> None:
        self._selection.reset_selection_ui()

    # ------------------------------------------------------------------
    # Quests
    # ------------------------------------------------------------------

    def commit_quest(self, name: str, experience_point_value: int = 0) -> Quest:
        """
        Commit the current selection draft as a new quest.

        The required attribute is appended at normal strength when the user
        did not pick it. The draft is reset afterwards.

        Raises:
            ValidationError: Keyed by ``quest_name``, ``affected_attributes``
                or ``experience_point_value``.
        """
        errors: Dict[str, List[str]] = {}

        name_errors = validate_quest_name(name, self.quests)
        if name_errors:
            errors["quest_name"] = name_errors
        elif len(self.quests) >= MAX_QUESTS_ALLOWED:
            errors["quest_name"] = [f"No more than {MAX_QUESTS_ALLOWED} quests are allowed"]

        selected = self._selection.selected_attributes
        if not selected:
            errors["affected_attributes"] = ["Select at least one attribute"]

        remaining = self.points_remaining
        if experience_point_value < 0:
            errors["experience_point_value"] = ["Experience cannot be negative"]
        elif experience_point_value > remaining:
            errors["experience_point_value"] = [
                f"Not enough experience: only {remaining} "
                f"{get_noun_and_verb_agreement('point', remaining)} remaining"
            ]

        if errors:
            first = next(iter(errors.values()))[0]
            raise ValidationError(first, errors)

        affected = list(selected)
        if all(a.name != REQUIRED_ATTRIBUTE_NAME for a in affected):
            affected.append(create_affected_attribute(REQUIRED_ATTRIBUTE_NAME))

        quest = create_quest(name.strip(), affected, len(self.quests), experience_point_value)
        if not self._quests.add_quest(quest):
            raise InvariantError(f"Quest {quest.name!r} passed validation but was rejected")

        self._selection.reset_selection_ui()
        logger.info(
            "Quest committed: %s (%d xp) affecting %s",
            quest.name,
            experience_point_value,
            ", ".join(
                get_attribute_display_string(a)
                for a in sort_affected_attributes(quest.affected_attributes)
            ),
        )
        return self._quests.quests[-1]

    def delete_quest(self, name: str) -> bool:
        return self._quests.delete_quest(name)

    def move_quest(self, name: str, direction: Direction) -> bool:
        return self._quests.change_quest_order(name, direction)

    def change_quest_experience(self, name: str, direction: Direction) -> bool:
        return self._quests.change_quest_experience(name, direction)
